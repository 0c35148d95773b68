"""`add account`: issue an account claim signed by the operator."""

from __future__ import annotations

from dataclasses import dataclass, field

from trustkit.actions import ActionContext
from trustkit.claims import AccountClaim, OperatorClaim
from trustkit.crypto.keys import Role
from trustkit.editor import ClaimEditor, apply_tags, apply_time_window
from trustkit.entity import Entity, EntityParams
from trustkit.errors import AmbiguousScopeError, KeyResolutionError, ValidationError
from trustkit.keyresolver import ResolvedKey


def edit_account_claim(claim: AccountClaim, params: "AddAccountParams") -> None:
    apply_time_window(claim, params.time)
    apply_tags(claim, params.tags)


ACCOUNT_EDITOR: ClaimEditor[AccountClaim] = ClaimEditor(AccountClaim, edit_account_claim)


@dataclass
class AddAccountParams(EntityParams):
    entity: Entity = field(default_factory=lambda: Entity(Role.ACCOUNT))
    operator_name: str = ""
    # -K/--private-key: overrides the operator key found in the key store.
    signer_key: str = ""
    operator_claim: OperatorClaim | None = None
    operator_key: ResolvedKey | None = None
    editor: ClaimEditor[AccountClaim] | None = None
    exists: bool = False

    @property
    def scope_name(self) -> str:
        return self.operator_name

    def set_defaults(self, ctx: ActionContext) -> None:
        self.entity.kind = Role.ACCOUNT
        self.editor = ACCOUNT_EDITOR
        if not self.operator_name:
            self.operator_name = ctx.store.operator_name

    def pre_interactive(self, ctx: ActionContext) -> None:
        prompter = ctx.prompt
        self.entity.edit(prompter)
        self.operator_name = ctx.store.pick_operator(self.operator_name, prompter)
        self.time.edit(prompter.text)
        if not self.operator_name:
            return
        resolved = ctx.keys.resolve(
            Role.OPERATOR,
            self.signer_key or None,
            scope=self.operator_name,
            prompter=prompter,
            mandatory=False,
        )
        if resolved is not None and resolved.reference:
            self.signer_key = resolved.reference

    def load(self, ctx: ActionContext) -> None:
        if not self.operator_name:
            return
        store = ctx.store.operator_store(self.operator_name)
        if not store.exists():
            return
        claim = store.read_claim(Role.OPERATOR, self.operator_name)
        if isinstance(claim, OperatorClaim):
            self.operator_claim = claim
        if self.entity.name:
            self.exists = store.has_claim(Role.ACCOUNT, self.entity.name)

    def validate(self, ctx: ActionContext) -> None:
        self.require_name()

        if not self.operator_name:
            raise AmbiguousScopeError(kind="operator", count=len(ctx.store.list_operators()))
        if self.operator_claim is None:
            raise ValidationError(f"operator {self.operator_name!r} is not defined")
        if self.exists:
            raise ValidationError(f"account {self.entity.name!r} already exists")

        self.operator_key = ctx.keys.resolve(
            Role.OPERATOR, self.signer_key or None, scope=self.operator_name
        )
        if self.operator_key.key_pair.public_key != self.operator_claim.sub:
            raise KeyResolutionError(
                f"{self.operator_key.key_pair.public_key} is not the key of operator "
                f"{self.operator_name!r}"
            )

        self.time.validate()
        self.entity.valid()

    def run(self, ctx: ActionContext) -> None:
        store = ctx.store.operator_store(self.operator_name)
        self.entity.store_keys(ctx.store.keystore)
        self.claim, token = self.entity.generate_claim(
            self.operator_key.key_pair, self.editor, self
        )
        self.claim_path = str(store.store_claim(Role.ACCOUNT, self.entity.name, token))
