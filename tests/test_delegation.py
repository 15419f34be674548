"""Tests for scoped query methods called through a criteria chain."""

from __future__ import annotations

import pytest

from cqrs_ddd_search_criteria import (
    Criteria,
    CriteriaError,
    IQueryable,
    Queryable,
    QueryMethodNotFoundError,
    scope_method,
)


class Catalog(Queryable):
    @scope_method
    def cheap(cls, scope, ceiling=10):
        return scope.lt(price=ceiling)

    @scope_method
    def named(cls, scope, name):
        return scope.where(name=name)

    @scope_method
    def describe(cls, scope):
        return f"{cls.__name__}: {scope.selector}"

    @classmethod
    def helper(cls):
        return "not a query"


class SaleCatalog(Catalog):
    @scope_method
    def on_sale(cls, scope):
        return scope.where(tags="sale")

    @classmethod
    def named(cls, name):
        return name


class Plain:
    pass


# -- Registration ------------------------------------------------------------


def test_scope_methods_are_collected():
    assert sorted(Catalog.scope_methods()) == ["cheap", "describe", "named"]
    assert isinstance(Catalog, IQueryable)


def test_subclass_inherits_and_overrides():
    assert sorted(SaleCatalog.scope_methods()) == ["cheap", "describe", "on_sale"]


def test_scope_method_is_still_a_classmethod():
    scope = Criteria(Catalog)
    assert Catalog.cheap(scope, 3).selector == "(price:{* TO 3})"


# -- Delegation --------------------------------------------------------------


def test_attribute_delegation_passes_scope():
    crit = Criteria(Catalog).where(tags="sale").cheap()
    assert crit.selector == "(tags:sale) AND (price:{* TO 10})"


def test_delegate_with_arguments():
    crit = Criteria(Catalog).delegate("named", "Joe")
    assert crit.selector == "(name:Joe)"


def test_delegated_call_receives_current_snapshot():
    crit = Criteria(Catalog).where(a=1)
    assert crit.describe() == "Catalog: (a:1)"


def test_delegation_does_not_mutate_scope():
    base = Criteria(SaleCatalog).where(a=1)
    derived = base.on_sale().cheap(ceiling=5)

    assert base.selector == "(a:1)"
    assert derived.selector == "(a:1) AND (tags:sale) AND (price:{* TO 5})"


# -- Failures ----------------------------------------------------------------


def test_unregistered_method_raises():
    with pytest.raises(QueryMethodNotFoundError) as exc_info:
        Criteria(Catalog).helper()

    assert exc_info.value.method == "helper"
    assert exc_info.value.target == "Catalog"


def test_misspelled_method_suggests():
    with pytest.raises(QueryMethodNotFoundError) as exc_info:
        Criteria(Catalog).delegate("cheep")

    assert exc_info.value.suggestions == ["cheap"]
    assert "Did you mean: cheap?" in str(exc_info.value)


def test_target_without_capability():
    with pytest.raises(QueryMethodNotFoundError) as exc_info:
        Criteria(Plain).where(a=1).anything()

    assert exc_info.value.available == []


def test_not_found_is_attribute_and_criteria_error():
    crit = Criteria(Plain)
    assert not hasattr(crit, "anything")
    with pytest.raises(AttributeError):
        crit.anything  # noqa: B018
    with pytest.raises(CriteriaError):
        crit.anything  # noqa: B018


def test_private_names_are_not_delegated():
    with pytest.raises(AttributeError) as exc_info:
        Criteria(Catalog)._cheap  # noqa: B018

    assert not isinstance(exc_info.value, QueryMethodNotFoundError)
