"""Resolution of the key pair a command needs for a given role."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from trustkit.context import StoreContext
from trustkit.crypto.keys import KeyFormatError, KeyPair, Role, is_public_key, is_seed
from trustkit.errors import KeyResolutionError
from trustkit.prompts import Prompter


@dataclass(frozen=True)
class ResolvedKey:
    key_pair: KeyPair
    # Explicit path or literal the key came from; None for the context default.
    reference: str | None = None

    @property
    def role(self) -> Role:
        return self.key_pair.role


def load_key_reference(reference: str, role: Role, *, signing: bool = True) -> KeyPair:
    """Load a literal seed/public key, or a file containing one."""
    candidate = reference.strip()
    if not is_seed(candidate) and not is_public_key(candidate):
        path = Path(candidate).expanduser()
        if not path.is_file():
            raise KeyResolutionError(
                f"{reference!r} is neither a {role.value} key nor a readable key file"
            )
        try:
            candidate = path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise KeyResolutionError(f"failed to read key file {path}: {exc}") from exc

    try:
        key_pair = KeyPair.from_seed(candidate) if is_seed(candidate) else KeyPair.from_public_key(candidate)
    except KeyFormatError as exc:
        raise KeyResolutionError(f"invalid {role.value} key in {reference!r}: {exc}") from exc

    if key_pair.role != role:
        raise KeyResolutionError(
            f"{reference!r} is a {key_pair.role.value} key, expected a {role.value} key"
        )
    if signing and not key_pair.has_seed:
        raise KeyResolutionError(
            f"{reference!r} is a public key - a {role.value} seed is required to sign"
        )
    return key_pair


class KeyResolver:
    def __init__(self, context: StoreContext) -> None:
        self._context = context

    def resolve(
        self,
        role: Role,
        explicit: str | None = None,
        *,
        scope: str | None = None,
        prompter: Prompter | None = None,
        mandatory: bool = True,
    ) -> ResolvedKey | None:
        """Explicit reference, then the context default, then a prompt when given one."""
        if explicit:
            return ResolvedKey(load_key_reference(explicit, role), explicit)

        key_pair = self._context.default_key(role, scope)
        if key_pair is not None:
            return ResolvedKey(key_pair)

        if prompter is not None:
            reference = prompter.text(f"{role.value} keypath")
            if reference:
                return ResolvedKey(load_key_reference(reference, role), reference)

        if not mandatory:
            return None
        target = f"{role.value} {scope!r}" if scope else role.value
        raise KeyResolutionError(
            f"unable to resolve the {target} signing key - specify --private-key"
        )
