"""
Permission gate: ``resource:action`` strings held by a validated caller.
"""
import json
import re
from dataclasses import dataclass
from typing import FrozenSet, Optional

ALL_PERMISSIONS = (
    "pages:read",
    "pages:write",
    "products:read",
    "products:write",
    "blog:read",
    "blog:write",
    "forms:read",
    "forms:write",
    "submissions:read",
    "submissions:write",
)

DEFAULT_PERMISSIONS = ("pages:read", "products:read", "blog:read", "forms:read")


def norm_permissions(val) -> FrozenSet[str]:
    """Normalize stored permissions (list, JSON text or comma separated) to a set"""
    if not val:
        return frozenset()
    if isinstance(val, str):
        val = val.strip()
        if val.startswith("["):
            try:
                parsed = json.loads(val)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                return frozenset(str(p).strip() for p in parsed if p)
        return frozenset(p for p in re.split(r"[\s,]+", val) if p)
    try:
        return frozenset(str(p).strip() for p in val if p)
    except TypeError:
        return frozenset()


@dataclass(frozen=True)
class CallerContext:
    """An authenticated caller. ``key_id`` is None for anonymous form submits."""
    tenant_id: str
    key_id: Optional[str] = None
    permissions: FrozenSet[str] = frozenset()

    def has_permission(self, required: str) -> bool:
        return required in self.permissions

    @property
    def is_anonymous(self) -> bool:
        return self.key_id is None
