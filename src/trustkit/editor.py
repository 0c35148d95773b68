"""Claim editors bound to the claim type they mutate."""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from trustkit.claims import BaseClaim
from trustkit.errors import ClaimTypeMismatchError
from trustkit.permissions import merge_patterns
from trustkit.timewindow import TimeParams

ClaimT = TypeVar("ClaimT", bound=BaseClaim)


class ClaimEditor(Generic[ClaimT]):
    def __init__(self, claim_type: type[ClaimT], edit: Callable[[ClaimT, Any], None]) -> None:
        self.claim_type = claim_type
        self._edit = edit

    def apply(self, claim: BaseClaim, params: Any) -> None:
        if not isinstance(claim, self.claim_type):
            raise ClaimTypeMismatchError(
                f"{self.claim_type.__name__} editor cannot edit {type(claim).__name__}"
            )
        self._edit(claim, params)


def apply_time_window(claim: BaseClaim, time_params: TimeParams) -> None:
    """Set nbf/exp only for bounds the caller changed; 0 clears a bound."""
    if time_params.is_start_changed():
        claim.nbf = time_params.start_date() or None
    if time_params.is_expiry_changed():
        claim.exp = time_params.expiry_date() or None


def normalize_tags(tags: list[str]) -> list[str]:
    return [tag.strip().lower() for tag in tags]


def apply_tags(claim: BaseClaim, tags: list[str]) -> None:
    claim.tags = merge_patterns(claim.tags, normalize_tags(tags))
