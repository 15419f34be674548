"""
Criteria: chainable Lucene-style query snapshots with lazy, cached execution.

Example::

    products = Criteria(Product, backend=solr, store=repository)

    on_sale = products.where(tags="sale")
    cheap = on_sale.lt(price=10).sort({"price": "asc"}).limit(20)
    # cheap.selector -> "(tags:sale) AND (price:{* TO 10})"

    cheap.total        # one backend round-trip
    cheap.documents    # one record fetch, no further search
    on_sale.selector   # unchanged -> "(tags:sale)"

Every builder call returns a new snapshot; the receiver is never modified.
Nothing is sent to the backend until ``total``, ``document_ids``, ``docs``,
``documents`` or ``count()`` is accessed, and the parsed response is reused
until a further builder call derives a new snapshot.
"""

from __future__ import annotations

import copy
import functools
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import lucene
from .exceptions import (
    CollaboratorError,
    CriteriaError,
    EmptySelectorError,
    QueryFailedError,
    QueryMethodNotFoundError,
)
from .ports import IQueryable, IRecordStore, ISearchBackend
from .response import SearchResponse
from .result import CacheState, ResultCache
from .settings import DEFAULT_SETTINGS, CriteriaSettings
from .utils import order_by_ids, target_name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger("cqrs_ddd.search_criteria")

Condition = Mapping[str, Any]


def _conditions(
    conditions: tuple[Condition, ...], fields: dict[str, Any]
) -> list[Condition]:
    """Positional condition mappings followed by keyword ``field=value`` pairs."""
    collected = list(conditions)
    if fields:
        collected.append(fields)
    return collected


class Criteria:
    """
    Immutable query snapshot bound to a target type.

    Parameters
    ----------
    target:
        The type being queried.  Used for delegation of scoped query
        methods and, when *backend* / *store* are omitted, as the search
        backend (``target.search``) and record store (``target.find``).
    backend:
        Explicit :class:`~cqrs_ddd_search_criteria.ports.ISearchBackend`.
    store:
        Explicit :class:`~cqrs_ddd_search_criteria.ports.IRecordStore`.
    settings:
        Rendering/parsing configuration, inherited by derived snapshots.
    """

    def __init__(
        self,
        target: Any,
        *,
        backend: ISearchBackend | None = None,
        store: IRecordStore | None = None,
        settings: CriteriaSettings | None = None,
    ) -> None:
        self._target = target
        self._backend = backend
        self._store = store
        self._settings = settings if settings is not None else DEFAULT_SETTINGS
        self._selector = ""
        self._options: dict[str, Any] = {}
        self._cache = ResultCache()

    # -- state ---------------------------------------------------------------

    @property
    def target(self) -> Any:
        return self._target

    @property
    def settings(self) -> CriteriaSettings:
        return self._settings

    @property
    def selector(self) -> str:
        """The accumulated query text; empty when no filter was applied."""
        return self._selector

    @property
    def options(self) -> dict[str, Any]:
        """Copy of the ``rows`` / ``start`` / ``sort`` options."""
        return copy.deepcopy(self._options)

    @property
    def state(self) -> CacheState:
        return self._cache.state

    @property
    def cached(self) -> bool:
        """``True`` once the current response has been parsed."""
        return self._cache.parsed

    @property
    def response(self) -> Any:
        """Raw backend response of the current generation, if executed."""
        return self._cache.response

    @property
    def backend(self) -> ISearchBackend:
        if self._backend is not None:
            return self._backend
        if isinstance(self._target, ISearchBackend):
            return self._target
        raise CollaboratorError(target_name(self._target), "search")

    @property
    def store(self) -> IRecordStore:
        if self._store is not None:
            return self._store
        if isinstance(self._target, IRecordStore):
            return self._target
        raise CollaboratorError(target_name(self._target), "find")

    # -- immutable chain -----------------------------------------------------

    def _derive(self, *, keep_cache: bool = False) -> Criteria:
        """New snapshot with copied selector/options (and optionally cache)."""
        crit = type(self).__new__(type(self))
        crit._target = self._target
        crit._backend = self._backend
        crit._store = self._store
        crit._settings = self._settings
        crit._selector = self._selector
        crit._options = copy.deepcopy(self._options)
        crit._cache = self._cache.copy() if keep_cache else ResultCache()
        return crit

    def copy(self) -> Criteria:
        """Snapshot copy, including an independent copy of the cache."""
        return self._derive(keep_cache=True)

    __copy__ = copy

    def reload(self) -> Criteria:
        """Same query, empty cache: the next accessor hits the backend again."""
        return self._derive()

    def to_scope(self) -> Callable[[], Criteria]:
        """Zero-argument callable returning this snapshot (a deferred scope)."""
        return lambda: self

    def merge(self, other: Criteria) -> Criteria:
        """
        Combine with *other* into a new snapshot.

        *other*'s selector is ``AND``-appended as one fragment and its
        options override ours.
        """
        return self.copy().update(other)

    def update(self, other: Criteria) -> Criteria:
        """In-place form of :meth:`merge`; returns ``self``."""
        if other.selector:
            self._selector = lucene.append_fragment(self._selector, other.selector)
        self._options.update(other.options)
        self._cache = ResultCache()
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Criteria):
            return NotImplemented
        return (
            self._target == other._target
            and self._selector == other._selector
            and self._options == other._options
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"<Criteria {target_name(self._target)} "
            f"selector={self._selector!r} options={self._options!r}>"
        )

    # -- expression builder --------------------------------------------------

    def where(
        self,
        condition: str | Condition | None = None,
        /,
        **fields: Any,
    ) -> Criteria:
        """
        Add a restriction.

        A string is appended verbatim; a mapping (or keyword arguments)
        becomes ``AND``-joined ``field:value`` pairs::

            criteria.where(tags="nerd", name="Joe")
            # -> "(tags:nerd AND name:Joe)"
        """
        if isinstance(condition, str):
            if fields:
                raise TypeError("where() takes a query string or fields, not both")
            fragment = condition
        else:
            pairs = {**(condition or {}), **fields}
            if not pairs:
                return self.copy()
            fragment = lucene.render_pairs(pairs)
        crit = self._derive()
        crit._selector = lucene.append_fragment(crit._selector, fragment)
        return crit

    def or_(self, *conditions: Condition, **fields: Any) -> Criteria:
        """
        Add a group of alternatives::

            criteria.or_({"name": "Pants"}, {"name": "Shirt"})
            # -> "((name:Pants) OR (name:Shirt))"
        """
        fragments = [
            lucene.render_pairs(condition, lucene.OR)
            for condition in _conditions(conditions, fields)
        ]
        crit = self._derive()
        crit._selector = lucene.append_group(
            crit._selector, fragments, operator=lucene.OR
        )
        return crit

    any_of = or_

    def between(self, *conditions: Condition, **fields: Any) -> Criteria:
        """
        Add inclusive ranges.  Values are ``[lo, hi]`` pairs or ``range``::

            criteria.between(price=[12, 20])
            # -> "(price:[12 TO 20])"
        """
        return self._add_ranges(_conditions(conditions, fields), exclusive=False)

    def lt(self, *conditions: Condition, **fields: Any) -> Criteria:
        """``field:{* TO value}``"""
        bounded = [
            lucene.with_bound(c, self._settings.wildcard, lower=True)
            for c in _conditions(conditions, fields)
        ]
        return self._add_ranges(bounded, exclusive=True)

    def gt(self, *conditions: Condition, **fields: Any) -> Criteria:
        """``field:{value TO *}``"""
        bounded = [
            lucene.with_bound(c, self._settings.wildcard, lower=False)
            for c in _conditions(conditions, fields)
        ]
        return self._add_ranges(bounded, exclusive=True)

    def lte(self, *conditions: Condition, **fields: Any) -> Criteria:
        """
        Inclusive range with the configured sentinel as lower bound.

        Renders ``field:[<range_sentinel> TO value]``.
        """
        bounded = [
            lucene.with_bound(c, self._settings.range_sentinel, lower=True)
            for c in _conditions(conditions, fields)
        ]
        return self._add_ranges(bounded, exclusive=False)

    def gte(self, *conditions: Condition, **fields: Any) -> Criteria:
        """Inclusive range ``field:[value TO <range_sentinel>]``."""
        bounded = [
            lucene.with_bound(c, self._settings.range_sentinel, lower=False)
            for c in _conditions(conditions, fields)
        ]
        return self._add_ranges(bounded, exclusive=False)

    def _add_ranges(self, conditions: list[Condition], *, exclusive: bool) -> Criteria:
        fragments = [
            lucene.render_range_pairs(c, exclusive=exclusive) for c in conditions if c
        ]
        crit = self._derive()
        if len(fragments) == 1:
            crit._selector = lucene.append_fragment(crit._selector, fragments[0])
        else:
            crit._selector = lucene.append_group(crit._selector, fragments)
        return crit

    def sort(self, spec: str | Mapping[str, Any]) -> Criteria:
        """
        Add sort clauses::

            criteria.sort({"availability": "ASC", "created_at": "desc"})
            # options["sort"] -> "availability asc, created_at desc"
        """
        crit = self._derive()
        sort = lucene.append_sort(crit._options.get("sort"), lucene.render_sort(spec))
        if sort is not None:
            crit._options["sort"] = sort
        return crit

    order_by = sort
    order = sort

    def limit(self, rows: int) -> Criteria:
        """Page size (``rows`` option)."""
        crit = self._derive()
        crit._options["rows"] = rows
        return crit

    rows = limit

    def skip(self, start: int) -> Criteria:
        """Offset (``start`` option)."""
        crit = self._derive()
        crit._options["start"] = start
        return crit

    start = skip

    # -- lazy executor -------------------------------------------------------

    def execute(self) -> Any:
        """
        Send the selector and options to the backend and keep the raw response.

        Raises:
            EmptySelectorError: If no filter has been applied.
        """
        if not self._selector.strip():
            raise EmptySelectorError
        backend = self.backend
        options = self.options
        self._cache.reset(CacheState.PENDING)
        started = time.perf_counter()
        try:
            response = backend.search(self._selector, options)
        except Exception:
            self._cache.reset(CacheState.FAILED)
            raise
        elapsed = (time.perf_counter() - started) * 1000
        logger.debug(
            "Search %r %s completed in %.2fms", self._selector, options, elapsed
        )
        self._cache.store_response(response)
        return response

    def _parse_response(self) -> None:
        if self._cache.parsed:
            return
        try:
            if self._cache.response is None:
                self.execute()
            parsed = SearchResponse.from_raw(self._cache.response)
            document_ids = parsed.document_ids(self._settings.id_field)
        except CriteriaError:
            self._cache.reset(CacheState.FAILED)
            raise
        except Exception as e:  # noqa: BLE001
            self._cache.reset(CacheState.FAILED)
            logger.warning("Search %r failed: %s", self._selector, e)
            raise QueryFailedError(
                self._selector, self._options, reason=f"{type(e).__name__}: {e}"
            ) from e
        self._cache.load(parsed.total, parsed.docs, document_ids)

    @property
    def total(self) -> int:
        """Number of matches reported by the backend (ignores rows/start)."""
        self._parse_response()
        return self._cache.total  # type: ignore[return-value]

    @property
    def document_ids(self) -> list[Any]:
        """Ids of the returned page in backend order."""
        self._parse_response()
        return self._cache.document_ids

    @property
    def docs(self) -> list[dict[str, Any]]:
        """Raw docs of the returned page."""
        self._parse_response()
        return self._cache.docs

    @property
    def documents(self) -> list[Any]:
        """Records for the returned page, loaded once per cache generation."""
        if self._cache.materialized:
            return self._cache.documents  # type: ignore[return-value]
        self._parse_response()
        ids = self._cache.document_ids
        if not ids:
            self._cache.documents = []
            return self._cache.documents
        store = self.store
        started = time.perf_counter()
        records = store.find(list(ids))
        elapsed = (time.perf_counter() - started) * 1000
        logger.debug(
            "Loaded %d of %d records in %.2fms", len(records), len(ids), elapsed
        )
        self._cache.documents = order_by_ids(records, ids, self._settings.id_field)
        return self._cache.documents

    def count(self, extras: bool = False) -> int:
        """
        Number of documents.

        ``count()`` is the size of the loaded page (rows/start applied);
        ``count(True)`` is the backend total, regardless of pagination.
        """
        if extras:
            return self.total
        return len(self.documents)

    def first(self) -> Any | None:
        """First record of the page, or ``None``."""
        documents = self.documents
        return documents[0] if documents else None

    def __iter__(self) -> Iterator[Any]:
        return iter(self.documents)

    def __len__(self) -> int:
        return self.count()

    def __bool__(self) -> bool:
        # Truthiness never runs the query.
        return True

    def in_batches(self, limit: int | None = None) -> Iterator[Criteria]:
        """
        Yield consecutive pages as snapshots.

        Each page is a fresh query ``limit(limit).skip(n * limit)``; iteration
        stops at the first page with no matches.
        """
        size = limit if limit is not None else self._settings.default_batch_size
        if size <= 0:
            raise ValueError(f"Batch size must be positive, got {size}")
        page = 0
        while True:
            batch = self.limit(size).skip(page * size)
            if batch.count(True) <= 0 or not batch.document_ids:
                return
            yield batch
            page += 1

    # -- delegation ----------------------------------------------------------

    def delegate(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call the target's scoped query *name* with this snapshot as scope."""
        return self._scope_method(name)(*args, **kwargs)

    def _scope_method(self, name: str) -> Callable[..., Any]:
        methods: Mapping[str, Callable[..., Any]] = (
            self._target.scope_methods() if isinstance(self._target, IQueryable) else {}
        )
        method = methods.get(name)
        if method is None:
            raise QueryMethodNotFoundError(
                name, target_name(self._target), list(methods)
            )
        return functools.partial(method, self)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not regular attributes, or when a
        # property raised AttributeError while being computed.
        if name.startswith("_"):
            raise AttributeError(name)
        if hasattr(type(self), name):
            raise AttributeError(
                f"'{type(self).__name__}.{name}' raised AttributeError "
                "while being computed"
            )
        return self._scope_method(name)
