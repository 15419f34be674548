"""Helpers shared by the criteria engine and the in-memory adapters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_MISSING = object()


def resolve_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read *name* from a mapping key or an attribute."""
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def order_by_ids(
    records: Sequence[Any], ids: Sequence[Any], id_field: str
) -> list[Any]:
    """
    Reorder *records* to follow *ids*.

    Records are returned in their original order if any of them has no
    id, or an id that is not part of *ids*.
    """
    positions = {record_id: index for index, record_id in enumerate(ids)}
    keys: list[int] = []
    for record in records:
        record_id = resolve_field(record, id_field, _MISSING)
        if record_id is _MISSING or record_id not in positions:
            return list(records)
        keys.append(positions[record_id])
    ordered = sorted(zip(keys, records, strict=True), key=lambda pair: pair[0])
    return [record for _, record in ordered]


def target_name(target: Any) -> str:
    """Human readable name of a target type (or instance)."""
    if isinstance(target, type):
        return target.__name__
    return type(target).__name__
