"""`add user`: issue a user claim signed by its account."""

from __future__ import annotations

from dataclasses import dataclass, field

from trustkit.actions import ActionContext
from trustkit.claims import AccountClaim, UserClaim
from trustkit.crypto.keys import Role
from trustkit.editor import ClaimEditor, apply_tags, apply_time_window
from trustkit.entity import Entity, EntityParams
from trustkit.errors import AmbiguousScopeError, KeyResolutionError, ValidationError
from trustkit.keyresolver import ResolvedKey
from trustkit.permissions import PermissionInputs, build_permissions, merge_patterns


def edit_user_claim(claim: UserClaim, params: "AddUserParams") -> None:
    apply_time_window(claim, params.time)
    claim.permissions = build_permissions(params.permissions, claim.permissions)
    apply_tags(claim, params.tags)
    claim.src = merge_patterns(claim.src, params.src)


USER_EDITOR: ClaimEditor[UserClaim] = ClaimEditor(UserClaim, edit_user_claim)


@dataclass
class AddUserParams(EntityParams):
    entity: Entity = field(default_factory=lambda: Entity(Role.USER))
    account_name: str = ""
    # -K/--private-key: overrides the account key found in the key store.
    signer_key: str = ""
    permissions: PermissionInputs = field(default_factory=PermissionInputs)
    src: list[str] = field(default_factory=list)
    account_claim: AccountClaim | None = None
    account_key: ResolvedKey | None = None
    editor: ClaimEditor[UserClaim] | None = None
    exists: bool = False

    @property
    def scope_name(self) -> str:
        return self.account_name

    def set_defaults(self, ctx: ActionContext) -> None:
        self.entity.kind = Role.USER
        self.editor = USER_EDITOR
        if not self.account_name:
            self.account_name = ctx.store.account_name

    def pre_interactive(self, ctx: ActionContext) -> None:
        prompter = ctx.prompt
        self.entity.edit(prompter)
        self.account_name = ctx.store.pick_account(self.account_name, prompter)
        self.time.edit(prompter.text)
        self.tags = prompter.list_input("tags", default=self.tags)
        if not self.account_name:
            return
        resolved = ctx.keys.resolve(
            Role.ACCOUNT,
            self.signer_key or None,
            scope=self.account_name,
            prompter=prompter,
            mandatory=False,
        )
        if resolved is not None and resolved.reference:
            self.signer_key = resolved.reference

    def load(self, ctx: ActionContext) -> None:
        if not self.account_name or self.account_name not in ctx.store.list_accounts():
            return
        store = ctx.store.operator_store()
        claim = store.read_claim(Role.ACCOUNT, self.account_name)
        if isinstance(claim, AccountClaim):
            self.account_claim = claim
        if self.entity.name:
            self.exists = store.has_claim(Role.USER, self.entity.name, account=self.account_name)

    def validate(self, ctx: ActionContext) -> None:
        self.require_name()

        if not self.account_name:
            # The context found no single default, so there are none or several.
            raise AmbiguousScopeError(kind="account", count=len(ctx.store.list_accounts()))
        if self.account_claim is None:
            raise ValidationError(f"account {self.account_name!r} is not defined")
        if self.exists:
            raise ValidationError(
                f"user {self.entity.name!r} already exists in account {self.account_name!r}"
            )

        self.account_key = ctx.keys.resolve(
            Role.ACCOUNT, self.signer_key or None, scope=self.account_name
        )
        if self.account_key.key_pair.public_key != self.account_claim.sub:
            raise KeyResolutionError(
                f"{self.account_key.key_pair.public_key} is not the key of account "
                f"{self.account_name!r}"
            )

        self.time.validate()
        self.entity.valid()

    def run(self, ctx: ActionContext) -> None:
        store = ctx.store.operator_store()
        self.entity.store_keys(ctx.store.keystore)
        self.claim, token = self.entity.generate_claim(
            self.account_key.key_pair, self.editor, self
        )
        self.claim_path = str(
            store.store_claim(Role.USER, self.entity.name, token, account=self.account_name)
        )
