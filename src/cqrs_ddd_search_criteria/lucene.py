"""
Lucene-style query text rendering.

Every builder call on :class:`~cqrs_ddd_search_criteria.criteria.Criteria`
contributes one parenthesized *fragment* to the selector::

    render_pairs({"tags": "nerd", "name": "Joe"})
    # -> "tags:nerd AND name:Joe"

    append_fragment("", "tags:nerd AND name:Joe")
    # -> "(tags:nerd AND name:Joe)"

    render_range_pairs({"price": [12, 20]})
    # -> "price:[12 TO 20]"

    render_range_pairs({"quantity": (0, "*")}, exclusive=True)
    # -> "quantity:{0 TO *}"

Nothing is quoted or escaped: values are rendered verbatim and the caller
is responsible for safe input.  The query text is never parsed back.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

AND = "AND"
OR = "OR"

_INCLUSIVE = ("[", "]")
_EXCLUSIVE = ("{", "}")


# -- value helpers -------------------------------------------------------------


def range_bounds(value: Any) -> tuple[Any, Any] | None:
    """
    Return the ``(lo, hi)`` bounds of a range-like value.

    Sequences (list/tuple) contribute their first and last element, a
    ``range`` its first and last member.  Any other value is not a range
    and yields ``None``.
    """
    if isinstance(value, range):
        if not value:
            raise ValueError(f"Cannot render empty range {value!r}")
        return value[0], value[-1]
    if isinstance(value, list | tuple) and value:
        return value[0], value[-1]
    return None


def with_bound(
    conditions: Mapping[str, Any],
    bound: Any,
    *,
    lower: bool,
) -> dict[str, list[Any]]:
    """
    Return a copy of *conditions* with *bound* added to every value.

    ``lower=True`` prepends the bound (``v`` -> ``[bound, v]``), otherwise it
    is appended (``v`` -> ``[v, bound]``).  The input mapping is not modified.
    """
    result: dict[str, list[Any]] = {}
    for field, value in conditions.items():
        values = list(value) if isinstance(value, list | tuple | range) else [value]
        result[field] = [bound, *values] if lower else [*values, bound]
    return result


# -- fragment rendering --------------------------------------------------------


def render_pairs(conditions: Mapping[str, Any], operator: str = AND) -> str:
    """Render ``field:value`` pairs joined by *operator*."""
    return f" {operator} ".join(
        f"{field}:{value}" for field, value in conditions.items()
    )


def render_range_pairs(
    conditions: Mapping[str, Any], *, exclusive: bool = False
) -> str:
    """
    Render range conditions joined by ``AND``.

    Range-like values become ``field:[lo TO hi]`` (``{lo TO hi}`` when
    *exclusive*); any other value renders as ``field: value``.
    """
    opening, closing = _EXCLUSIVE if exclusive else _INCLUSIVE
    fragments: list[str] = []
    for field, value in conditions.items():
        bounds = range_bounds(value)
        if bounds is None:
            fragments.append(f"{field}: {value}")
        else:
            lo, hi = bounds
            fragments.append(f"{field}:{opening}{lo} TO {hi}{closing}")
    return f" {AND} ".join(fragments)


# -- selector assembly ---------------------------------------------------------


def append_fragment(selector: str, fragment: str, operator: str = AND) -> str:
    """
    Append ``(fragment)`` to *selector*.

    The join operator is omitted when the selector is empty or when it ends
    with an opening parenthesis (first member of a group).
    """
    if not selector or selector.endswith("("):
        return f"{selector}({fragment})"
    return f"{selector} {operator} ({fragment})"


def append_group(
    selector: str,
    fragments: Iterable[str],
    *,
    operator: str = AND,
) -> str:
    """
    Append one parenthesized group of *fragments* to *selector*.

    Members are joined by *operator*; the group itself is ``AND``-joined
    to a non-empty selector.  An empty group leaves the selector unchanged.
    """
    group = "("
    for fragment in fragments:
        group = append_fragment(group, fragment, operator)
    if group == "(":
        return selector
    separator = f" {AND} " if selector else ""
    return f"{selector}{separator}{group})"


# -- sorting -------------------------------------------------------------------


def render_sort(spec: str | Mapping[str, Any]) -> list[str]:
    """Render ``{field: direction}`` as ``"field direction"`` clauses."""
    if isinstance(spec, str):
        return [spec]
    clauses: list[str] = []
    for field, direction in spec.items():
        # Enum directions render their value
        direction = getattr(direction, "value", direction)
        clauses.append(f"{field} {str(direction).lower()}")
    return clauses


def append_sort(existing: str | None, clauses: Iterable[str]) -> str | None:
    """Join *clauses* onto an existing comma-separated sort option."""
    parts = [existing] if existing else []
    parts.extend(clauses)
    return ", ".join(parts) if parts else None
