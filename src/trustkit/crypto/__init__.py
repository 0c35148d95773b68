from trustkit.crypto.keys import (
    KeyFormatError,
    KeyPair,
    Role,
    decode_public_key,
    decode_seed,
    encode_public_key,
    is_public_key,
    is_seed,
)

__all__ = [
    "KeyFormatError",
    "KeyPair",
    "Role",
    "decode_public_key",
    "decode_seed",
    "encode_public_key",
    "is_public_key",
    "is_seed",
]
