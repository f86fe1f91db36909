"""
Incoming-wins merge of product lists.
"""

from __future__ import annotations

from typing import Any

from core.errors import RecordValidationError


def record_id(record: Any, *, position: int) -> int:
    if not isinstance(record, dict):
        raise RecordValidationError(f"Incoming product #{position} is not an object.")
    raw = record.get("id")
    # bool is an int subclass; `true` is not an id.
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise RecordValidationError(f"Incoming product #{position} has no integer id.")
    return raw


def merge_products(
    existing: list[dict[str, Any]],
    incoming: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """
    Merge `incoming` into `existing` by id.

    - same id: the incoming record replaces the existing one at its position
    - new id:  appended, in input order
    - existing records with no incoming counterpart are kept as they are

    Neither input list is modified.
    """
    merged = list(existing)
    positions: dict[int, int] = {}
    for index, record in enumerate(merged):
        rid = record.get("id")
        if isinstance(rid, int) and not isinstance(rid, bool):
            positions.setdefault(rid, index)

    for position, record in enumerate(incoming):
        rid = record_id(record, position=position)
        if rid in positions:
            merged[positions[rid]] = record
        else:
            positions[rid] = len(merged)
            merged.append(record)
    return merged
