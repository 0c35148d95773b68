"""`add operator`: create a self-signed operator and its store directory."""

from __future__ import annotations

from dataclasses import dataclass, field

from trustkit.actions import ActionContext
from trustkit.claims import OperatorClaim
from trustkit.crypto.keys import Role
from trustkit.editor import ClaimEditor, apply_tags, apply_time_window
from trustkit.entity import Entity, EntityParams
from trustkit.errors import ValidationError


def edit_operator_claim(claim: OperatorClaim, params: "AddOperatorParams") -> None:
    apply_time_window(claim, params.time)
    apply_tags(claim, params.tags)


OPERATOR_EDITOR: ClaimEditor[OperatorClaim] = ClaimEditor(OperatorClaim, edit_operator_claim)


@dataclass
class AddOperatorParams(EntityParams):
    entity: Entity = field(default_factory=lambda: Entity(Role.OPERATOR))
    store_dir: str = ""
    editor: ClaimEditor[OperatorClaim] | None = None
    exists: bool = False

    @property
    def scope_name(self) -> str:
        return self.store_dir

    def set_defaults(self, ctx: ActionContext) -> None:
        self.entity.kind = Role.OPERATOR
        self.editor = OPERATOR_EDITOR
        self.store_dir = str(ctx.store.store_dir)

    def pre_interactive(self, ctx: ActionContext) -> None:
        prompter = ctx.prompt
        self.entity.edit(prompter)
        self.time.edit(prompter.text)

    def load(self, ctx: ActionContext) -> None:
        self.exists = bool(self.entity.name) and self.entity.name in ctx.store.list_operators()

    def validate(self, ctx: ActionContext) -> None:
        self.require_name()
        if self.exists:
            raise ValidationError(f"operator {self.entity.name!r} already exists")
        self.time.validate()
        # Self-signed: a supplied key must carry its seed.
        self.entity.valid(require_seed=True)

    def run(self, ctx: ActionContext) -> None:
        store = ctx.store.operator_store(self.entity.name)
        self.entity.store_keys(ctx.store.keystore)
        self.claim, token = self.entity.generate_claim(self.entity.key_pair, self.editor, self)
        self.claim_path = str(store.store_claim(Role.OPERATOR, self.entity.name, token))
