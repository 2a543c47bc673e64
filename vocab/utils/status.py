"""Status/lifecycle flag normalization."""

from __future__ import annotations

from typing import Any

ACTIVE_STATUSES = frozenset({"active", "current", "ongoing", "open", "live"})
INACTIVE_STATUSES = frozenset(
    {"inactive", "withdrawn", "closed", "deprecated", "obsolete", "terminated", "ended", "retired"}
)


def normalize_status(raw: Any) -> tuple[bool, list[str]]:
    """Interpret a status value as an active flag; anything unreadable counts as active."""
    if raw is None:
        return True, []
    if isinstance(raw, bool):
        return raw, []
    if isinstance(raw, str):
        status = raw.strip().lower()
        if status in ACTIVE_STATUSES:
            return True, []
        if status in INACTIVE_STATUSES:
            return False, []
        if not status:
            return True, []
    return True, [f"Unrecognized status {raw!r}; treated as active"]


__all__ = ["normalize_status", "ACTIVE_STATUSES", "INACTIVE_STATUSES"]
