"""Translation of provider-agnostic tool schemas into provider-native formats.

Two families exist:

- function/tool-calling (OpenAI, DeepSeek, Anthropic): JSON-Schema-like, lower-case
  types, wrapped as a function (OpenAI/DeepSeek) or a tool with ``input_schema``
  (Anthropic);
- Gemini: the same tree with every ``type`` and ``enum`` value upper-cased and
  no wrapper, embedded as ``generationConfig.responseSchema``.

Both families share the recursive lowering; only the leaf casing and the outer
wrapper differ.
"""

from typing import Any, Callable, Dict, List, Mapping, Union

from debug_assistant.errors import UnknownProviderError

from ..schemas.tool_schema import InputSpec, InputType, ToolSchema
from .base import ProviderId

SchemaInput = Union[ToolSchema, Mapping[str, Any]]


def _identity(value: str) -> str:
    return value


def _upper(value: str) -> str:
    return value.upper()


class SchemaTranslator:
    """Lower ``ToolSchema`` trees for a given provider."""

    def __init__(self, casing: Callable[[str], str] = _identity) -> None:
        """
        Args:
            casing: Applied to every ``type`` value and ``enum`` member
        """
        self._case = casing

    def lower_inputs(self, inputs: List[InputSpec]) -> Dict[str, Any]:
        """Lower a list of inputs into an object schema with ``properties``/``required``."""
        node: Dict[str, Any] = {
            "type": self._case(InputType.OBJECT.value),
            "properties": {spec.name: self.lower_input(spec) for spec in inputs},
        }
        # Only immediate children, in source order; omitted when empty.
        required = [spec.name for spec in inputs if spec.required]
        if required:
            node["required"] = required
        return node

    def lower_input(self, spec: InputSpec) -> Dict[str, Any]:
        """Lower one input spec, recursing into objects and arrays."""
        if spec.type is InputType.OBJECT:
            lowered = self.lower_inputs(spec.properties or [])
            return {"type": lowered.pop("type"), "description": spec.description, **lowered}

        node: Dict[str, Any] = {"type": self._case(spec.type.value), "description": spec.description}
        if spec.type is InputType.ARRAY:
            node["items"] = self.lower_input(spec.item)
        elif spec.enum:
            node["enum"] = [self._case(value) for value in spec.enum]
        return node


_FUNCTION_FAMILY = SchemaTranslator()
_GEMINI_FAMILY = SchemaTranslator(casing=_upper)


def _as_schema(schema: SchemaInput) -> ToolSchema:
    return schema if isinstance(schema, ToolSchema) else ToolSchema.parse(schema)


def to_openai_tool(schema: SchemaInput) -> Dict[str, Any]:
    """Function-calling tool for OpenAI and DeepSeek chat completions."""
    schema = _as_schema(schema)
    return {
        "type": "function",
        "function": {
            "name": schema.name,
            "description": schema.description,
            "parameters": _FUNCTION_FAMILY.lower_inputs(schema.inputs),
        },
    }


def to_anthropic_tool(schema: SchemaInput) -> Dict[str, Any]:
    """Tool definition for the Anthropic messages API."""
    schema = _as_schema(schema)
    return {
        "name": schema.name,
        "description": schema.description,
        "input_schema": _FUNCTION_FAMILY.lower_inputs(schema.inputs),
    }


def to_gemini_schema(schema: SchemaInput) -> Dict[str, Any]:
    """Response schema for Gemini ``generationConfig.responseSchema``."""
    return _GEMINI_FAMILY.lower_inputs(_as_schema(schema).inputs)


_BUILDERS: Dict[ProviderId, Callable[[SchemaInput], Dict[str, Any]]] = {
    ProviderId.ANTHROPIC: to_anthropic_tool,
    ProviderId.OPENAI: to_openai_tool,
    ProviderId.DEEPSEEK: to_openai_tool,
    ProviderId.GEMINI: to_gemini_schema,
}


def to_provider_schema(schema: SchemaInput, provider: Union[str, ProviderId]) -> Dict[str, Any]:
    """Translate ``schema`` into the native format of ``provider``.

    Raises:
        SchemaValidationError: If ``schema`` is raw data with an invalid shape
        UnknownProviderError: If ``provider`` is not supported
    """
    provider_id = ProviderId.parse(provider)
    builder = _BUILDERS.get(provider_id)
    if builder is None:
        raise UnknownProviderError(provider)
    return builder(schema)
