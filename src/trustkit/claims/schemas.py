"""Entity claim schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

CLAIM_VERSION = "TK-1"
OPERATOR_TYPE = "operator"
ACCOUNT_TYPE = "account"
USER_TYPE = "user"


class Permission(BaseModel):
    model_config = ConfigDict(extra="forbid")

    allow: List[str] = Field(default_factory=list)
    deny: List[str] = Field(default_factory=list)


class Permissions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pub: Permission = Field(default_factory=Permission)
    sub: Permission = Field(default_factory=Permission)


class BaseClaim(BaseModel):
    model_config = ConfigDict(extra="forbid")

    claim_version: Literal["TK-1"] = CLAIM_VERSION
    claim_type: str
    jti: Optional[str] = None
    iat: Optional[int] = None
    iss: Optional[str] = None
    sub: str
    name: str
    nbf: Optional[int] = None
    exp: Optional[int] = None
    tags: List[str] = Field(default_factory=list)


class OperatorClaim(BaseClaim):
    claim_type: Literal["operator"] = OPERATOR_TYPE


class AccountClaim(BaseClaim):
    claim_type: Literal["account"] = ACCOUNT_TYPE


class UserClaim(BaseClaim):
    claim_type: Literal["user"] = USER_TYPE
    permissions: Permissions = Field(default_factory=Permissions)
    src: List[str] = Field(default_factory=list)


CLAIM_TYPES: dict[str, type[BaseClaim]] = {
    OPERATOR_TYPE: OperatorClaim,
    ACCOUNT_TYPE: AccountClaim,
    USER_TYPE: UserClaim,
}
