"""Configuration for criteria rendering, parsing and batching."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CriteriaSettings(BaseModel):
    """Settings shared by a criteria snapshot and everything derived from it."""

    model_config = ConfigDict(frozen=True)

    # Key read from every response doc, and attribute used to order records.
    id_field: str = "id"

    # Bound added by lte()/gte().
    range_sentinel: int | str = 10**20

    # Open bound added by lt()/gt().
    wildcard: str = "*"

    default_batch_size: int = Field(default=1000, gt=0)


DEFAULT_SETTINGS = CriteriaSettings()
