"""Compact signed claim tokens.

Token format:
- <b64url(header)>.<b64url(payload)>.<b64url(signature)>
where header and payload are canonical JSON and the signature is an Ed25519
signature by the `iss` key over "<b64url(header)>.<b64url(payload)>".
"""

from __future__ import annotations

import base64
import hashlib
import json
import time

from pydantic import ValidationError as PydanticValidationError

from trustkit.claims.schemas import CLAIM_TYPES, BaseClaim
from trustkit.crypto.keys import KeyFormatError, KeyPair
from trustkit.errors import ClaimDecodeError

TOKEN_HEADER = {"typ": "JWT", "alg": "ed25519"}


def _canonical_bytes(payload: dict) -> bytes:
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def compute_claim_hash(payload: dict) -> str:
    unsigned = {key: value for key, value in payload.items() if key != "jti"}
    digest = hashlib.sha256(_canonical_bytes(unsigned)).digest()
    return base64.b32encode(digest).decode("ascii").rstrip("=")


def encode_claim(claim: BaseClaim, signer: KeyPair, *, issued_at: int | None = None) -> str:
    """Stamp issuer, issue time and id onto `claim` and return the signed token."""
    claim.iss = signer.public_key
    claim.iat = issued_at if issued_at is not None else int(time.time())
    claim.jti = None
    payload = claim.model_dump(exclude_none=True)
    claim.jti = compute_claim_hash(payload)
    payload["jti"] = claim.jti

    signing_input = f"{_b64url(_canonical_bytes(TOKEN_HEADER))}.{_b64url(_canonical_bytes(payload))}"
    signature = signer.sign(signing_input.encode("ascii"))
    return f"{signing_input}.{_b64url(signature)}"


def decode_claim(token: str) -> BaseClaim:
    parts = token.strip().split(".")
    if len(parts) != 3:
        raise ClaimDecodeError("claim token must have three segments")

    try:
        header = json.loads(_b64url_decode(parts[0]))
        payload = json.loads(_b64url_decode(parts[1]))
        signature = _b64url_decode(parts[2])
    except Exception as exc:
        raise ClaimDecodeError("claim token is not valid base64url JSON") from exc

    if header != TOKEN_HEADER:
        raise ClaimDecodeError("unsupported claim token header")
    if not isinstance(payload, dict):
        raise ClaimDecodeError("claim payload must be an object")

    claim_cls = CLAIM_TYPES.get(payload.get("claim_type"))
    if claim_cls is None:
        raise ClaimDecodeError(f"unknown claim_type: {payload.get('claim_type')!r}")

    issuer = payload.get("iss")
    if not isinstance(issuer, str):
        raise ClaimDecodeError("claim has no issuer")
    try:
        issuer_key = KeyPair.from_public_key(issuer)
    except KeyFormatError as exc:
        raise ClaimDecodeError(f"invalid issuer key: {exc}") from exc

    signing_input = f"{parts[0]}.{parts[1]}".encode("ascii")
    if not issuer_key.verify(signature, signing_input):
        raise ClaimDecodeError("claim signature verification failed")
    if payload.get("jti") != compute_claim_hash(payload):
        raise ClaimDecodeError("claim id does not match payload")

    try:
        return claim_cls.model_validate(payload)
    except PydanticValidationError as exc:
        raise ClaimDecodeError(f"claim payload failed schema validation: {exc}") from exc
