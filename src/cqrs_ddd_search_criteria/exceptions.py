"""
Criteria exception hierarchy.

All exceptions inherit from ``CriteriaError`` and provide ``to_dict()``
for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class CriteriaError(Exception):
    """Base exception for all criteria errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class EmptySelectorError(CriteriaError):
    """Raised when a query is executed before any filter was applied."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or "Cannot execute a search without a selector; add a filter first."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "EMPTY_SELECTOR",
            "message": str(self),
        }


class QueryFailedError(CriteriaError):
    """
    The search could not be executed or its response could not be parsed.

    The originating exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        selector: str,
        options: dict[str, Any] | None = None,
        reason: str | None = None,
    ) -> None:
        self.selector = selector
        self.options = dict(options or {})
        self.reason = reason

        message = f"Search query failed: {selector!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "QUERY_FAILED",
            "selector": self.selector,
            "options": self.options,
            "reason": self.reason,
        }


class QueryMethodNotFoundError(CriteriaError, AttributeError):
    """
    A delegated call names a method the target type does not expose.

    Provides fuzzy-matched suggestions for likely intended method names.
    """

    def __init__(self, method: str, target: str, available: list[str]) -> None:
        self.method = method
        self.target = target
        self.available = available
        self.suggestions = get_close_matches(method, available, n=3, cutoff=0.6)

        message = f"'{target}' has no query method '{method}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "QUERY_METHOD_NOT_FOUND",
            "method": self.method,
            "target": self.target,
            "suggestions": self.suggestions,
            "available": sorted(self.available),
        }


class CollaboratorError(CriteriaError, TypeError):
    """No search backend or record store could be resolved for a target."""

    def __init__(self, target: str, capability: str) -> None:
        self.target = target
        self.capability = capability
        super().__init__(
            f"'{target}' does not provide '{capability}' and no explicit "
            f"collaborator was given"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "COLLABORATOR_MISSING",
            "target": self.target,
            "capability": self.capability,
        }
