from __future__ import annotations

import random

from trustkit.claims import Permission, Permissions
from trustkit.permissions import PermissionInputs, build_permissions, merge_patterns


def _inputs() -> PermissionInputs:
    return PermissionInputs(
        allow_pub=["foo.>", "a.b", "foo.>"],
        allow_sub=["z.*", "a.b"],
        allow_pubsub=["bar.>", "a.b"],
        deny_pub=["secret.>"],
        deny_sub=["baz.>", "baz.>"],
        deny_pubsub=["admin.>"],
    )


def test_merge_patterns_sorts_and_deduplicates() -> None:
    assert merge_patterns(["b", "a"], ["c", "a"], None, ["b", ""]) == ["a", "b", "c"]


def test_build_permissions_routes_pubsub_lists_to_both_sides() -> None:
    result = build_permissions(
        PermissionInputs(allow_pub=["foo.>"], allow_pubsub=["bar.>"], deny_sub=["baz.>"])
    )

    assert result.pub.allow == ["bar.>", "foo.>"]
    assert result.pub.deny == []
    assert result.sub.allow == ["bar.>"]
    assert result.sub.deny == ["baz.>"]


def test_build_permissions_is_order_independent() -> None:
    expected = build_permissions(_inputs())
    rng = random.Random(7)

    for _ in range(20):
        shuffled = _inputs()
        for values in (
            shuffled.allow_pub,
            shuffled.allow_sub,
            shuffled.allow_pubsub,
            shuffled.deny_pub,
            shuffled.deny_sub,
            shuffled.deny_pubsub,
        ):
            rng.shuffle(values)
        assert build_permissions(shuffled) == expected


def test_build_permissions_is_idempotent() -> None:
    once = build_permissions(_inputs())
    twice = build_permissions(_inputs(), once)
    assert twice == once

    for permission in (once.pub, once.sub):
        assert permission.allow == sorted(set(permission.allow))
        assert permission.deny == sorted(set(permission.deny))


def test_build_permissions_merges_into_existing_lists() -> None:
    existing = Permissions(pub=Permission(allow=["old.>"], deny=["zzz"]))
    result = build_permissions(PermissionInputs(allow_pub=["new.>"]), existing)

    assert result.pub.allow == ["new.>", "old.>"]
    assert result.pub.deny == ["zzz"]
    # The input set is not mutated.
    assert existing.pub.allow == ["old.>"]


def test_allow_and_deny_of_same_pattern_coexist() -> None:
    result = build_permissions(PermissionInputs(allow_pubsub=["x.>"], deny_pub=["x.>"]))
    assert result.pub.allow == ["x.>"]
    assert result.pub.deny == ["x.>"]
    assert result.sub.allow == ["x.>"]
