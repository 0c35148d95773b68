"""Role-tagged Ed25519 key pairs and their text encodings.

Public key format:
- <role prefix><base32(raw_public_key + checksum)>
Seed format:
- S<role prefix><base32(raw_private_key + checksum)>
where checksum is the first two bytes of sha256(raw key bytes) and the base32
alphabet is RFC 4648 without padding.
"""

from __future__ import annotations

import base64
import hashlib
from enum import Enum

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

SEED_PREFIX = "S"
_RAW_KEY_LEN = 32
_CHECKSUM_LEN = 2


class Role(str, Enum):
    OPERATOR = "operator"
    ACCOUNT = "account"
    USER = "user"

    @property
    def prefix(self) -> str:
        return _ROLE_PREFIXES[self]


_ROLE_PREFIXES = {Role.OPERATOR: "O", Role.ACCOUNT: "A", Role.USER: "U"}
_PREFIX_ROLES = {value: key for key, value in _ROLE_PREFIXES.items()}


class KeyFormatError(ValueError):
    """Raised when an encoded key or seed is malformed."""


def _checksum(raw: bytes) -> bytes:
    return hashlib.sha256(raw).digest()[:_CHECKSUM_LEN]


def _encode(prefix: str, raw: bytes) -> str:
    encoded = base64.b32encode(raw + _checksum(raw)).decode("ascii").rstrip("=")
    return f"{prefix}{encoded}"


def _decode(body: str) -> bytes:
    padded = body + "=" * (-len(body) % 8)
    try:
        data = base64.b32decode(padded)
    except Exception as exc:
        raise KeyFormatError("key is not valid base32") from exc
    if len(data) != _RAW_KEY_LEN + _CHECKSUM_LEN:
        raise KeyFormatError("key has an invalid length")
    raw, checksum = data[:_RAW_KEY_LEN], data[_RAW_KEY_LEN:]
    if _checksum(raw) != checksum:
        raise KeyFormatError("key checksum mismatch")
    return raw


def encode_public_key(role: Role, public_key_bytes: bytes) -> str:
    return _encode(role.prefix, public_key_bytes)


def decode_public_key(value: str) -> tuple[Role, bytes]:
    value = value.strip()
    if not value:
        raise KeyFormatError("public key is empty")
    role = _PREFIX_ROLES.get(value[0])
    if role is None:
        raise KeyFormatError(f"unknown public key prefix: {value[0]!r}")
    return role, _decode(value[1:])


def decode_seed(value: str) -> tuple[Role, bytes]:
    value = value.strip()
    if len(value) < 2 or value[0] != SEED_PREFIX:
        raise KeyFormatError("seed must start with 'S'")
    role = _PREFIX_ROLES.get(value[1])
    if role is None:
        raise KeyFormatError(f"unknown seed role prefix: {value[1]!r}")
    return role, _decode(value[2:])


def is_seed(value: str) -> bool:
    try:
        decode_seed(value)
    except KeyFormatError:
        return False
    return True


def is_public_key(value: str, role: Role | None = None) -> bool:
    try:
        decoded_role, _ = decode_public_key(value)
    except KeyFormatError:
        return False
    return role is None or decoded_role == role


class KeyPair:
    """An Ed25519 key tagged with its role; the private half is optional."""

    def __init__(
        self,
        role: Role,
        public_key_bytes: bytes,
        private_key_bytes: bytes | None = None,
    ) -> None:
        self.role = role
        self.public_key_bytes = public_key_bytes
        self._private_key_bytes = private_key_bytes

    def __repr__(self) -> str:
        return f"KeyPair(role={self.role.value!r}, public_key={self.public_key!r})"

    @classmethod
    def generate(cls, role: Role) -> "KeyPair":
        private = Ed25519PrivateKey.generate()
        return cls(
            role,
            private.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw),
            private.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption()),
        )

    @classmethod
    def from_seed(cls, seed: str) -> "KeyPair":
        role, private_key_bytes = decode_seed(seed)
        private = Ed25519PrivateKey.from_private_bytes(private_key_bytes)
        return cls(
            role,
            private.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw),
            private_key_bytes,
        )

    @classmethod
    def from_public_key(cls, public_key: str) -> "KeyPair":
        role, public_key_bytes = decode_public_key(public_key)
        return cls(role, public_key_bytes)

    @property
    def public_key(self) -> str:
        return encode_public_key(self.role, self.public_key_bytes)

    @property
    def has_seed(self) -> bool:
        return self._private_key_bytes is not None

    @property
    def seed(self) -> str:
        if self._private_key_bytes is None:
            raise KeyFormatError(f"{self.role.value} key {self.public_key} has no seed")
        return _encode(SEED_PREFIX + self.role.prefix, self._private_key_bytes)

    def sign(self, message: bytes) -> bytes:
        if self._private_key_bytes is None:
            raise KeyFormatError(f"{self.role.value} key {self.public_key} cannot sign")
        return Ed25519PrivateKey.from_private_bytes(self._private_key_bytes).sign(message)

    def verify(self, signature: bytes, message: bytes) -> bool:
        try:
            Ed25519PublicKey.from_public_bytes(self.public_key_bytes).verify(signature, message)
        except InvalidSignature:
            return False
        return True
