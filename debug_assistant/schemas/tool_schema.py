"""Provider-agnostic tool schemas.

A ``ToolSchema`` describes the single tool a provider is forced to call when
structured output is wanted. The tree is validated on construction so a
malformed schema fails before any provider payload is built.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Optional

from pydantic import Field, ValidationError, model_validator

from debug_assistant.errors import SchemaValidationError

from .base import BaseSchema


class InputType(str, Enum):
    """Value types an input may declare."""

    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"


class InputSpec(BaseSchema):
    """One named input of a tool, possibly nested.

    Exactly one branch is populated per type: ``enum`` for scalars (optional),
    ``properties`` for objects, ``item`` for arrays.
    """

    name: str = Field(..., min_length=1, description="Input name")
    type: InputType = Field(..., description="Input value type")
    description: str = Field(default="", description="Human-readable description")
    required: bool = Field(default=False, description="Whether the parent object requires this input")
    enum: Optional[List[str]] = Field(default=None, description="Allowed values for scalar inputs")
    properties: Optional[List["InputSpec"]] = Field(default=None, description="Children of an object input")
    item: Optional["InputSpec"] = Field(default=None, description="Element spec of an array input")

    @model_validator(mode="after")
    def _check_branches(self) -> "InputSpec":
        if self.type is InputType.OBJECT:
            if not self.properties:
                raise ValueError(f"object input '{self.name}' requires non-empty properties")
            if self.item is not None or self.enum:
                raise ValueError(f"object input '{self.name}' may only declare properties")
        elif self.type is InputType.ARRAY:
            if self.item is None:
                raise ValueError(f"array input '{self.name}' requires an item spec")
            if self.properties or self.enum:
                raise ValueError(f"array input '{self.name}' may only declare item")
        elif self.properties or self.item is not None:
            raise ValueError(f"{self.type.value} input '{self.name}' cannot declare properties or item")
        return self


class ToolSchema(BaseSchema):
    """Description of one callable tool."""

    name: str = Field(..., min_length=1, description="Tool name the provider must call")
    description: str = Field(default="", description="What the tool is for")
    inputs: List[InputSpec] = Field(default_factory=list, description="Top-level inputs")

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> "ToolSchema":
        """Validate raw schema data, raising ``SchemaValidationError`` on a bad shape."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SchemaValidationError(f"Invalid tool schema: {e}") from e

    @classmethod
    def from_file(cls, path: Path) -> "ToolSchema":
        """Load and validate a schema JSON file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SchemaValidationError(f"Schema file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SchemaValidationError(f"Schema file {path} must contain a JSON object")
        return cls.parse(data)
