# apidescriber/model/session.py
"""Per-build memoization shared by the model describers of one document build."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from apidescriber.groups import GroupSpec


@dataclass
class BuildSession:
    """Caches that must not outlive one document build.

    Attributes
    ----------
    group_usage:
        Class name -> whether its properties declare groups other than the
        default one; ``None`` when the class has no metadata.
    previous_groups:
        Model hash -> the enclosing group specification a parent property
        scoped down for it, recovered when that model is described.
    """

    group_usage: dict[str, Optional[bool]] = field(default_factory=dict)
    previous_groups: dict[str, GroupSpec] = field(default_factory=dict)
