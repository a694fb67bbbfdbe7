# apidescriber/groups.py
"""Serialization group specifications.

A group specification is one of:

- ``None``: no filtering;
- a list of group names, e.g. ``["list", "details"]``;
- a list mixing group names with mappings from a property name to the
  specification used for that property's nested type, e.g.
  ``["Default", {"address": ["street"]}]``.  A bare mapping is read as a
  list holding that one mapping.

The singleton ``["Default"]`` means the same thing as ``None`` wherever
groups are inherited or compared.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Protocol, Union

__all__ = [
    "DEFAULT_GROUP",
    "GroupSpec",
    "group_entries",
    "scalar_groups",
    "nested_groups",
    "normalize_groups",
    "canonical_groups",
    "GroupsExclusionStrategy",
]

DEFAULT_GROUP = "Default"

GroupSpec = Optional[Union[list[Any], tuple[Any, ...], Mapping[str, Any]]]

_SCALARS = (str, int, float, bool)


def group_entries(groups: GroupSpec) -> list[Any]:
    """Flatten a specification into its list of entries."""
    if groups is None:
        return []
    if isinstance(groups, Mapping):
        return [groups]
    if isinstance(groups, (list, tuple)):
        return list(groups)
    return [groups]


def scalar_groups(groups: GroupSpec) -> list[Any]:
    """Keep only the plain group names of a specification."""
    return [entry for entry in group_entries(groups) if isinstance(entry, _SCALARS)]


def nested_groups(groups: GroupSpec, name: str) -> GroupSpec:
    """Return the specification scoped to property ``name``, if one is declared."""
    for entry in group_entries(groups):
        if isinstance(entry, Mapping) and name in entry:
            value = entry[name]
            if isinstance(value, (list, tuple, Mapping)):
                return value
    return None


def normalize_groups(groups: GroupSpec, default_group: str = DEFAULT_GROUP) -> Optional[list[Any]]:
    """Filter to plain names and collapse the default-group singleton to ``None``."""
    if groups is None:
        return None
    names = scalar_groups(groups)
    if names == [default_group]:
        return None
    return names


def canonical_groups(groups: GroupSpec, default_group: str = DEFAULT_GROUP) -> Any:
    """Hashable, order-insensitive form of a specification used for model identity."""
    if groups is None:
        return None
    names = sorted({str(name) for name in scalar_groups(groups)})
    scoped: dict[str, Any] = {}
    for entry in group_entries(groups):
        if isinstance(entry, Mapping):
            for key, value in entry.items():
                scoped[str(key)] = canonical_groups(value, default_group)
    if not scoped and names == [default_group]:
        return None
    return (tuple(names), tuple(sorted(scoped.items(), key=lambda item: item[0])))


class _HasGroups(Protocol):
    groups: Any


class GroupsExclusionStrategy:
    """Decide which properties a group specification exposes.

    A property without declared groups belongs to the default group; a
    property declaring ``True`` belongs to every group.  A specification
    with no plain names selects the default group.
    """

    def __init__(self, groups: GroupSpec, default_group: str = DEFAULT_GROUP) -> None:
        self.default_group = default_group
        self.groups = frozenset(scalar_groups(groups)) or frozenset({default_group})

    def should_skip_property(self, item: _HasGroups) -> bool:
        declared = item.groups
        if declared is True:
            return False
        if not declared:
            declared = [self.default_group]
        return not (self.groups & set(declared))
