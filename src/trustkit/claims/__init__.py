from trustkit.claims.schemas import (
    ACCOUNT_TYPE,
    CLAIM_TYPES,
    CLAIM_VERSION,
    OPERATOR_TYPE,
    USER_TYPE,
    AccountClaim,
    BaseClaim,
    OperatorClaim,
    Permission,
    Permissions,
    UserClaim,
)
from trustkit.claims.tokens import compute_claim_hash, decode_claim, encode_claim

__all__ = [
    "CLAIM_VERSION",
    "OPERATOR_TYPE",
    "ACCOUNT_TYPE",
    "USER_TYPE",
    "CLAIM_TYPES",
    "BaseClaim",
    "OperatorClaim",
    "AccountClaim",
    "UserClaim",
    "Permission",
    "Permissions",
    "compute_claim_hash",
    "decode_claim",
    "encode_claim",
]
