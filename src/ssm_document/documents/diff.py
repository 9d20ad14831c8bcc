"""Desired-vs-live differ for shared principals and tags.

Both functions are pure: no registry calls, no mutation of their inputs.

Principals only matter by presence::

    diff_principals(["111", "222"], ["222", "333"])
    → SetDiff(to_add=["111"], to_remove=["333"])

Tags match on key *and* value.  A tag whose value changed is re-added, which
overwrites the old value in the registry; only keys that disappeared from
the desired mapping are removed::

    diff_tags({"env": "prod", "team": "a"}, {"env": "dev", "owner": "x"})
    → TagDiff(to_add={"env": "prod", "team": "a"}, to_remove=["owner"])
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SetDiff:
    """Elements to add and remove to turn the live set into the desired one."""

    to_add: list[str] = field(default_factory=list)
    to_remove: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.to_add or self.to_remove)


@dataclass(frozen=True)
class TagDiff:
    """Tags to (re)write and tag keys to drop."""

    to_add: dict[str, str] = field(default_factory=dict)
    to_remove: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.to_add or self.to_remove)


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def diff_principals(desired: Iterable[str], live: Iterable[str]) -> SetDiff:
    """Compute ``desired \\ live`` and ``live \\ desired`` by exact string match."""
    desired_list = _unique(desired)
    live_list = _unique(live)
    desired_set = set(desired_list)
    live_set = set(live_list)

    return SetDiff(
        to_add=[p for p in desired_list if p not in live_set],
        to_remove=[p for p in live_list if p not in desired_set],
    )


def diff_tags(desired: Mapping[str, str], live: Mapping[str, str]) -> TagDiff:
    """Compute tag pairs to write and tag keys to remove."""
    return TagDiff(
        to_add={key: value for key, value in desired.items() if key not in live or live[key] != value},
        to_remove=[key for key in live if key not in desired],
    )


__all__ = ["SetDiff", "TagDiff", "diff_principals", "diff_tags"]
