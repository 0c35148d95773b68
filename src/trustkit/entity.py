"""Identity and key state shared by the add-entity commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from trustkit.claims import BaseClaim, encode_claim
from trustkit.crypto.keys import KeyPair, Role
from trustkit.editor import ClaimEditor
from trustkit.errors import ValidationError
from trustkit.keyresolver import load_key_reference
from trustkit.prompts import Prompter
from trustkit.store import KeyStore
from trustkit.timewindow import TimeParams


@dataclass
class Entity:
    kind: Role
    name: str = ""
    # -k/--public-key: literal public key or seed, or a file holding one.
    key_ref: str = ""
    generate: bool = False
    generated: bool = False
    key_path: str = ""
    key_pair: KeyPair | None = None

    def edit(self, prompter: Prompter) -> None:
        kind = self.kind.value
        self.name = prompter.text(f"{kind} name", default=self.name or None)
        self.generate = prompter.confirm(f"generate a new {kind} key", default=not self.key_ref)
        if not self.generate:
            self.key_ref = prompter.text(
                f"path to a {kind} key file, or the {kind} public key",
                default=self.key_ref or None,
            )

    def valid(self, *, require_seed: bool = False) -> None:
        if "/" in self.name or "\\" in self.name or self.name in {".", ".."}:
            raise ValidationError(f"{self.kind.value} name {self.name!r} is not a valid name")
        if not self.key_ref:
            self.generate = True
        if self.generate:
            self.key_pair = None
            return
        self.key_pair = load_key_reference(self.key_ref, self.kind, signing=require_seed)

    @property
    def public_key(self) -> str:
        if self.key_pair is None:
            raise RuntimeError(f"{self.kind.value} key has not been resolved")
        return self.key_pair.public_key

    def store_keys(self, keystore: KeyStore) -> None:
        """Persist a newly generated (or supplied) seed; public-only keys are not stored."""
        if self.generate:
            self.key_pair = KeyPair.generate(self.kind)
            self.key_path = str(keystore.store(self.key_pair))
            self.generated = True
        elif self.key_pair is not None and self.key_pair.has_seed:
            self.key_path = str(keystore.store(self.key_pair))

    def generate_claim(
        self,
        signer: KeyPair,
        editor: ClaimEditor,
        params: object,
    ) -> tuple[BaseClaim, str]:
        claim = editor.claim_type(sub=self.public_key, name=self.name)
        editor.apply(claim, params)
        return claim, encode_claim(claim, signer)


@dataclass
class EntityParams:
    """Fields and no-op phases common to every add-entity command."""

    entity: Entity
    tags: list[str] = field(default_factory=list)
    time: TimeParams = field(default_factory=TimeParams)
    claim: BaseClaim | None = None
    claim_path: str = ""

    @property
    def scope_name(self) -> str:
        return ""

    def require_name(self) -> None:
        if not self.entity.name:
            raise ValidationError(f"{self.entity.kind.value} name is required", show_usage=True)

    def load(self, ctx) -> None:
        return None

    def post_interactive(self, ctx) -> None:
        return None
