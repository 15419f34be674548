"""
ResultCache: the memoized result cell of one criteria snapshot.

A cache *generation* starts empty (``UNEXECUTED``) and moves through::

    UNEXECUTED --execute--> PENDING --parse--> CACHED
                               |                 |
                               +----failure------+--> FAILED

``FAILED`` holds no data and behaves exactly like ``UNEXECUTED``: the next
accessor starts a fresh round-trip.  Any builder call on a criteria
snapshot starts a new generation on the derived snapshot only.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any


class CacheState(str, Enum):
    """Lifecycle of a result cache generation."""

    UNEXECUTED = "unexecuted"
    PENDING = "pending"
    CACHED = "cached"
    FAILED = "failed"


class ResultCache:
    """Raw response, parsed totals/ids and materialized records."""

    __slots__ = ("document_ids", "docs", "documents", "response", "state", "total")

    def __init__(self) -> None:
        self.reset()

    def reset(self, state: CacheState = CacheState.UNEXECUTED) -> None:
        """Drop everything held by this generation."""
        self.state = state
        self.response: Any = None
        self.total: int | None = None
        self.docs: list[dict[str, Any]] = []
        self.document_ids: list[Any] = []
        self.documents: list[Any] | None = None

    def store_response(self, response: Any) -> None:
        self.reset(CacheState.PENDING)
        self.response = response

    def load(
        self, total: int, docs: list[dict[str, Any]], document_ids: list[Any]
    ) -> None:
        self.total = total
        self.docs = docs
        self.document_ids = document_ids
        self.state = CacheState.CACHED

    @property
    def parsed(self) -> bool:
        return self.state is CacheState.CACHED

    @property
    def materialized(self) -> bool:
        return self.documents is not None

    def copy(self) -> ResultCache:
        """Independent copy; mutating one never shows through the other."""
        clone = ResultCache()
        clone.state = self.state
        clone.response = copy.deepcopy(self.response)
        clone.total = self.total
        clone.docs = copy.deepcopy(self.docs)
        clone.document_ids = list(self.document_ids)
        clone.documents = None if self.documents is None else list(self.documents)
        return clone
