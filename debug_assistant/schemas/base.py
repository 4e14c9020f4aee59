"""Pydantic base schema utilities for debug assistant models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base Pydantic model for persisted and wire-level schemas.

    Configures common Pydantic behaviors:
    - ``populate_by_name=True``: Allow initialization by alias or field name.
    - ``extra="ignore"``: Tolerate unknown keys in files and provider payloads
      written by other versions.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )
