"""On-disk entity and key stores.

Entity store layout (one directory per operator):
- <store_dir>/<operator>/<operator>.jwt
- <store_dir>/<operator>/accounts/<account>/<account>.jwt
- <store_dir>/<operator>/accounts/<account>/users/<user>.jwt

Key store layout:
- <keys_dir>/<role>s/<public_key>.nk containing the seed
"""

from __future__ import annotations

import os
from pathlib import Path

from trustkit.claims import BaseClaim, decode_claim
from trustkit.crypto.keys import KeyFormatError, KeyPair, Role
from trustkit.errors import StoreError

ACCOUNTS = "accounts"
USERS = "users"
CLAIM_SUFFIX = ".jwt"
SEED_SUFFIX = ".nk"


def _chmod_owner_only(path: Path) -> None:
    if os.name != "posix":
        return
    path.chmod(0o600)


def _write_text(path: Path, text: str, *, owner_only: bool = False) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        if owner_only:
            _chmod_owner_only(path)
    except OSError as exc:
        raise StoreError(f"failed to write {path}: {exc}") from exc


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StoreError(f"failed to read {path}: {exc}") from exc


def list_operators(store_dir: str | Path) -> list[str]:
    root = Path(store_dir)
    if not root.is_dir():
        return []
    return sorted(
        child.name
        for child in root.iterdir()
        if child.is_dir() and (child / f"{child.name}{CLAIM_SUFFIX}").is_file()
    )


class EntityStore:
    """Claims for one operator and everything beneath it."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @property
    def operator_name(self) -> str:
        return self.root.name

    def exists(self) -> bool:
        return self.claim_path(Role.OPERATOR, self.operator_name).is_file()

    def claim_path(self, role: Role, name: str, *, account: str | None = None) -> Path:
        if role is Role.OPERATOR:
            return self.root / f"{name}{CLAIM_SUFFIX}"
        if role is Role.ACCOUNT:
            return self.root / ACCOUNTS / name / f"{name}{CLAIM_SUFFIX}"
        if not account:
            raise StoreError("user claims require an account")
        return self.root / ACCOUNTS / account / USERS / f"{name}{CLAIM_SUFFIX}"

    def has_claim(self, role: Role, name: str, *, account: str | None = None) -> bool:
        return self.claim_path(role, name, account=account).is_file()

    def read_token(self, role: Role, name: str, *, account: str | None = None) -> str:
        return _read_text(self.claim_path(role, name, account=account)).strip()

    def read_claim(self, role: Role, name: str, *, account: str | None = None) -> BaseClaim:
        return decode_claim(self.read_token(role, name, account=account))

    def store_claim(
        self,
        role: Role,
        name: str,
        token: str,
        *,
        account: str | None = None,
    ) -> Path:
        path = self.claim_path(role, name, account=account)
        _write_text(path, token + "\n")
        return path

    def list_sub_containers(self, container: str) -> list[str]:
        base = self.root / container
        if not base.is_dir():
            return []
        return sorted(child.name for child in base.iterdir() if child.is_dir())

    def list_accounts(self) -> list[str]:
        return [
            name
            for name in self.list_sub_containers(ACCOUNTS)
            if self.has_claim(Role.ACCOUNT, name)
        ]


class KeyStore:
    """Seeds indexed by role and public key."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, role: Role, public_key: str) -> Path:
        return self.root / f"{role.value}s" / f"{public_key}{SEED_SUFFIX}"

    def store(self, key_pair: KeyPair) -> Path:
        path = self.path_for(key_pair.role, key_pair.public_key)
        _write_text(path, key_pair.seed + "\n", owner_only=True)
        return path

    def get(self, public_key: str) -> KeyPair | None:
        try:
            probe = KeyPair.from_public_key(public_key)
        except KeyFormatError:
            return None
        path = self.path_for(probe.role, public_key)
        if not path.is_file():
            return None
        try:
            key_pair = KeyPair.from_seed(_read_text(path))
        except KeyFormatError as exc:
            raise StoreError(f"invalid seed in {path}: {exc}") from exc
        if key_pair.public_key != public_key:
            raise StoreError(f"seed in {path} does not match its public key")
        return key_pair
