"""Shared fixtures for criteria tests."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from cqrs_ddd_search_criteria import Criteria
from cqrs_ddd_search_criteria.adapters import InMemoryRecordStore, InMemorySearchBackend


class Product(BaseModel):
    id: str
    name: str
    price: int
    tags: list[str] = []


@pytest.fixture
def products() -> list[Product]:
    return [
        Product(id="p1", name="Pants", price=30, tags=["sale"]),
        Product(id="p2", name="Shirt", price=12, tags=["sale", "nerd"]),
        Product(id="p3", name="Socks", price=5),
    ]


@pytest.fixture
def backend(products: list[Product]) -> InMemorySearchBackend:
    return InMemorySearchBackend(p.model_dump() for p in products)


@pytest.fixture
def store(products: list[Product]) -> InMemoryRecordStore:
    return InMemoryRecordStore(products)


@pytest.fixture
def criteria(backend: InMemorySearchBackend, store: InMemoryRecordStore) -> Criteria:
    return Criteria(Product, backend=backend, store=store)
