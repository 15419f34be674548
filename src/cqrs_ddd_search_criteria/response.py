"""
Search response models.

The backend must answer with::

    {"response": {"numFound": <int>, "docs": [{"id": ...}, ...]}}

Additional keys are accepted and ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchResponseBody(BaseModel):
    """The ``response`` section: total match count plus the returned page."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    num_found: int = Field(alias="numFound", ge=0)
    docs: list[dict[str, Any]]


class SearchResponse(BaseModel):
    """Validated backend response."""

    model_config = ConfigDict(extra="allow")

    response: SearchResponseBody

    @classmethod
    def from_raw(cls, raw: Any) -> SearchResponse:
        """Validate a raw response (mapping or JSON text)."""
        if isinstance(raw, str | bytes | bytearray):
            return cls.model_validate_json(raw)
        return cls.model_validate(raw)

    @property
    def total(self) -> int:
        return self.response.num_found

    @property
    def docs(self) -> list[dict[str, Any]]:
        return self.response.docs

    def document_ids(self, id_field: str = "id") -> list[Any]:
        """Ids of the returned docs in backend order.

        Raises:
            KeyError: If a doc has no *id_field*.
        """
        return [doc[id_field] for doc in self.response.docs]
