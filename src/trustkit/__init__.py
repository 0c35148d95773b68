"""trustkit public surface."""

from trustkit.actions import ActionContext, EntityLifecycle, run_action
from trustkit.claims import (
    AccountClaim,
    BaseClaim,
    OperatorClaim,
    Permission,
    Permissions,
    UserClaim,
    decode_claim,
    encode_claim,
)
from trustkit.commands import AddAccountParams, AddOperatorParams, AddUserParams
from trustkit.context import StoreContext
from trustkit.crypto.keys import KeyPair, Role
from trustkit.editor import ClaimEditor
from trustkit.entity import Entity, EntityParams
from trustkit.errors import (
    AmbiguousScopeError,
    ClaimDecodeError,
    ClaimTypeMismatchError,
    KeyResolutionError,
    PromptAbortedError,
    StoreError,
    TimeRangeError,
    TrustKitError,
    ValidationError,
)
from trustkit.keyresolver import KeyResolver, ResolvedKey, load_key_reference
from trustkit.permissions import PermissionInputs, build_permissions, merge_patterns
from trustkit.prompts import Prompter
from trustkit.store import EntityStore, KeyStore
from trustkit.timewindow import TimeParams, parse_time_spec

__all__ = [
    "TrustKitError",
    "ValidationError",
    "AmbiguousScopeError",
    "KeyResolutionError",
    "TimeRangeError",
    "ClaimTypeMismatchError",
    "ClaimDecodeError",
    "StoreError",
    "PromptAbortedError",
    "ActionContext",
    "EntityLifecycle",
    "run_action",
    "Entity",
    "EntityParams",
    "AddOperatorParams",
    "AddAccountParams",
    "AddUserParams",
    "ClaimEditor",
    "BaseClaim",
    "OperatorClaim",
    "AccountClaim",
    "UserClaim",
    "Permission",
    "Permissions",
    "encode_claim",
    "decode_claim",
    "KeyPair",
    "Role",
    "KeyResolver",
    "ResolvedKey",
    "load_key_reference",
    "PermissionInputs",
    "build_permissions",
    "merge_patterns",
    "TimeParams",
    "parse_time_spec",
    "StoreContext",
    "EntityStore",
    "KeyStore",
    "Prompter",
]
