"""
Scoped query methods.

``scope_method`` marks a classmethod as callable from a criteria chain;
``Queryable`` collects the marked methods of a class (and its bases) and
implements :class:`~cqrs_ddd_search_criteria.ports.IQueryable`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable

_MARKER = "__criteria_scope_method__"


def scope_method(func: Callable[..., Any]) -> classmethod[Any, Any, Any]:
    """Expose *func* as a classmethod reachable from ``Criteria``."""
    setattr(func, _MARKER, True)
    return classmethod(func)


class Queryable:
    """Mixin that publishes ``@scope_method`` members via ``scope_methods()``."""

    __scope_method_names__: ClassVar[frozenset[str]] = frozenset()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        names: set[str] = set()
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                func = getattr(attr, "__func__", attr)
                if getattr(func, _MARKER, False):
                    names.add(name)
                else:
                    # A subclass may override a scope method with a plain one.
                    names.discard(name)
        cls.__scope_method_names__ = frozenset(names)

    @classmethod
    def scope_methods(cls) -> dict[str, Callable[..., Any]]:
        return {name: getattr(cls, name) for name in sorted(cls.__scope_method_names__)}
