"""In-memory search backend and record store, dict-backed fakes for unit tests."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from ..utils import resolve_field

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence


def _sort_docs(docs: list[dict[str, Any]], sort: str | None) -> list[dict[str, Any]]:
    """Apply a ``"field asc, other desc"`` sort option (stable, per clause)."""
    if not sort:
        return docs
    ordered = list(docs)
    for clause in reversed([c.strip() for c in sort.split(",") if c.strip()]):
        field, _, direction = clause.partition(" ")
        ordered.sort(
            key=lambda doc, f=field: (doc.get(f) is None, doc.get(f)),
            reverse=direction.strip().lower() == "desc",
        )
    return ordered


class InMemorySearchBackend:
    """
    Search backend serving a fixed set of docs.

    The query text is not interpreted: every doc matches unless a *matcher*
    ``(query, doc) -> bool`` is given.  ``sort``, ``start`` and ``rows``
    options are honoured and ``numFound`` is the unpaginated match count.
    Every call is recorded in :attr:`calls`.
    """

    def __init__(
        self,
        docs: Iterable[dict[str, Any]] = (),
        *,
        matcher: Callable[[str, dict[str, Any]], bool] | None = None,
    ) -> None:
        self._docs: list[dict[str, Any]] = [dict(doc) for doc in docs]
        self._matcher = matcher
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def add(self, doc: dict[str, Any]) -> None:
        self._docs.append(dict(doc))

    def search(self, query: str, options: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((query, dict(options)))
        matched = [
            doc
            for doc in self._docs
            if self._matcher is None or self._matcher(query, doc)
        ]
        matched = _sort_docs(matched, options.get("sort"))
        start = int(options.get("start") or 0)
        rows = options.get("rows")
        window = matched[start:] if rows is None else matched[start : start + int(rows)]
        return {
            "response": {
                "numFound": len(matched),
                "docs": copy.deepcopy(window),
            }
        }

    def __len__(self) -> int:
        return len(self._docs)


class InMemoryRecordStore:
    """
    Record store keyed by each record's id field.

    ``find`` returns records in the order of the requested ids and skips
    unknown ids.  Every call is recorded in :attr:`calls`.
    """

    def __init__(self, records: Iterable[Any] = (), *, id_field: str = "id") -> None:
        self._id_field = id_field
        self._records: dict[Any, Any] = {}
        self.calls: list[list[Any]] = []
        for record in records:
            self.add(record)

    def add(self, record: Any) -> None:
        record_id = resolve_field(record, self._id_field)
        if record_id is None:
            raise ValueError(f"Record has no '{self._id_field}': {record!r}")
        self._records[record_id] = record

    def find(self, ids: Sequence[Any]) -> list[Any]:
        self.calls.append(list(ids))
        return [self._records[i] for i in ids if i in self._records]

    def __len__(self) -> int:
        return len(self._records)
