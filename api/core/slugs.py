from __future__ import annotations

import re

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """
    Turn a display name into a URL path segment.

    "Admin Dashboard Pro!" -> "admin-dashboard-pro"

    Two names can collapse to the same slug; nothing here prevents that.
    """
    lowered = (name or "").lower()
    return _NON_SLUG_RUN.sub("-", lowered).strip("-")
