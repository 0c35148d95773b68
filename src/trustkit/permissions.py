"""Publish/subscribe permission set construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from trustkit.claims.schemas import Permission, Permissions


def merge_patterns(existing: Iterable[str] | None, *sources: Iterable[str] | None) -> list[str]:
    """Union of `existing` and every source, de-duplicated and sorted."""
    merged = set(existing or ())
    for source in sources:
        merged.update(source or ())
    merged.discard("")
    return sorted(merged)


@dataclass
class PermissionInputs:
    allow_pub: list[str] = field(default_factory=list)
    allow_sub: list[str] = field(default_factory=list)
    allow_pubsub: list[str] = field(default_factory=list)
    deny_pub: list[str] = field(default_factory=list)
    deny_sub: list[str] = field(default_factory=list)
    deny_pubsub: list[str] = field(default_factory=list)


def _merge_permission(
    existing: Permission,
    *,
    allow: list[str],
    allow_both: list[str],
    deny: list[str],
    deny_both: list[str],
) -> Permission:
    return Permission(
        allow=merge_patterns(existing.allow, allow, allow_both),
        deny=merge_patterns(existing.deny, deny, deny_both),
    )


def build_permissions(inputs: PermissionInputs, existing: Permissions | None = None) -> Permissions:
    """Merge `inputs` into `existing` and return a new permission set.

    The pub+sub lists feed both sides. A pattern may be both allowed and
    denied; which one wins is up to the consumer of the claim.
    """
    base = existing or Permissions()
    return Permissions(
        pub=_merge_permission(
            base.pub,
            allow=inputs.allow_pub,
            allow_both=inputs.allow_pubsub,
            deny=inputs.deny_pub,
            deny_both=inputs.deny_pubsub,
        ),
        sub=_merge_permission(
            base.sub,
            allow=inputs.allow_sub,
            allow_both=inputs.allow_pubsub,
            deny=inputs.deny_sub,
            deny_both=inputs.deny_pubsub,
        ),
    )
