"""Tests for the in-memory search backend and record store."""

from __future__ import annotations

import pytest

from cqrs_ddd_search_criteria import IRecordStore, ISearchBackend
from cqrs_ddd_search_criteria.adapters import InMemoryRecordStore, InMemorySearchBackend

DOCS = [
    {"id": "a", "price": 30, "name": "Pants"},
    {"id": "b", "price": 12, "name": "Shirt"},
    {"id": "c", "price": 5, "name": "Socks"},
    {"id": "d", "price": 12, "name": "Hat"},
]


class TestInMemorySearchBackend:
    @pytest.fixture
    def backend(self) -> InMemorySearchBackend:
        return InMemorySearchBackend(DOCS)

    def test_satisfies_protocol(self, backend: InMemorySearchBackend):
        assert isinstance(backend, ISearchBackend)

    def test_returns_all_docs_by_default(self, backend: InMemorySearchBackend):
        result = backend.search("(a:1)", {})
        assert result["response"]["numFound"] == 4
        assert [d["id"] for d in result["response"]["docs"]] == ["a", "b", "c", "d"]

    def test_paging_keeps_unpaginated_total(self, backend: InMemorySearchBackend):
        result = backend.search("(a:1)", {"rows": 2, "start": 1})
        assert result["response"]["numFound"] == 4
        assert [d["id"] for d in result["response"]["docs"]] == ["b", "c"]

    def test_sort_clauses(self, backend: InMemorySearchBackend):
        result = backend.search("(a:1)", {"sort": "price desc, name asc"})
        assert [d["id"] for d in result["response"]["docs"]] == ["a", "d", "b", "c"]

    def test_matcher(self):
        backend = InMemorySearchBackend(
            DOCS, matcher=lambda query, doc: doc["price"] == 12
        )
        result = backend.search("(price:12)", {})
        assert result["response"]["numFound"] == 2

    def test_records_calls_and_returns_copies(self, backend: InMemorySearchBackend):
        result = backend.search("(a:1)", {"rows": 1})
        result["response"]["docs"][0]["id"] = "changed"

        assert backend.calls == [("(a:1)", {"rows": 1})]
        assert backend.search("(a:1)", {})["response"]["docs"][0]["id"] == "a"

    def test_add(self, backend: InMemorySearchBackend):
        backend.add({"id": "e"})
        assert len(backend) == 5


class TestInMemoryRecordStore:
    @pytest.fixture
    def store(self) -> InMemoryRecordStore:
        return InMemoryRecordStore(DOCS)

    def test_satisfies_protocol(self, store: InMemoryRecordStore):
        assert isinstance(store, IRecordStore)

    def test_find_follows_requested_order(self, store: InMemoryRecordStore):
        assert [r["name"] for r in store.find(["c", "a"])] == ["Socks", "Pants"]

    def test_find_skips_unknown_ids(self, store: InMemoryRecordStore):
        assert store.find(["zzz", "b"]) == [DOCS[1]]
        assert store.calls == [["zzz", "b"]]

    def test_custom_id_field(self):
        store = InMemoryRecordStore([{"key": 1}], id_field="key")
        assert store.find([1]) == [{"key": 1}]
        assert len(store) == 1

    def test_record_without_id_rejected(self, store: InMemoryRecordStore):
        with pytest.raises(ValueError, match="has no 'id'"):
            store.add({"name": "anonymous"})
