"""Collaborator protocols: search backend, record store and scoped queries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence


@runtime_checkable
class ISearchBackend(Protocol):
    """
    Executes query text against a search index.

    The response must be shaped as
    ``{"response": {"numFound": int, "docs": [{"id": ...}, ...]}}``;
    JSON text of that shape is accepted too.
    """

    def search(self, query: str, options: dict[str, Any]) -> Any:
        """Run *query* with ``rows`` / ``start`` / ``sort`` *options*."""
        ...


@runtime_checkable
class IRecordStore(Protocol):
    """Loads full records for ids returned by a search."""

    def find(self, ids: Sequence[Any]) -> Sequence[Any]:
        """
        Return the records for *ids*.

        Records should follow the order of *ids*; if they expose the
        configured id field they are reordered to match.
        """
        ...


@runtime_checkable
class IQueryable(Protocol):
    """
    A target type exposing named queries that run inside a criteria scope.

    Each method receives the calling criteria snapshot as its first
    positional argument::

        class Products(Queryable):
            @scope_method
            def cheap(cls, scope, limit=10):
                return scope.lt(price=10).limit(limit)

        Criteria(Products).where(tags="sale").cheap()
    """

    def scope_methods(self) -> Mapping[str, Callable[..., Any]]:
        """Return the named queries available to a criteria scope."""
        ...
