"""Unit tests for lowering tool schemas into provider-native formats."""

import pytest

from debug_assistant.errors import SchemaValidationError, UnknownProviderError
from debug_assistant.providers.schema_translator import (
    to_anthropic_tool,
    to_gemini_schema,
    to_openai_tool,
    to_provider_schema,
)
from debug_assistant.schemas.tool_schema import ToolSchema

NESTED_SCHEMA = {
    "name": "respond",
    "description": "Respond with the next action",
    "inputs": [
        {"name": "action", "type": "string", "required": True, "enum": ["run_command", "message"]},
        {
            "name": "details",
            "type": "object",
            "description": "Action arguments",
            "properties": [
                {"name": "command", "type": "string", "description": "Shell command"},
                {"name": "file_paths", "type": "array", "item": {"name": "path", "type": "string"}, "required": True},
                {"name": "timeout", "type": "number", "required": True},
            ],
        },
        {"name": "message", "type": "string"},
    ],
}


@pytest.fixture
def schema() -> ToolSchema:
    return ToolSchema.parse(NESTED_SCHEMA)


class TestFunctionFamily:
    """OpenAI, DeepSeek and Anthropic share the lower-case tree."""

    def test_openai_wrapper(self, schema: ToolSchema) -> None:
        """The tree is wrapped as a function with parameters."""
        tool = to_openai_tool(schema)

        assert tool["type"] == "function"
        assert tool["function"]["name"] == "respond"
        assert tool["function"]["description"] == "Respond with the next action"
        assert tool["function"]["parameters"]["type"] == "object"

    def test_anthropic_wrapper(self, schema: ToolSchema) -> None:
        """Anthropic gets name, description and input_schema."""
        tool = to_anthropic_tool(schema)

        assert set(tool) == {"name", "description", "input_schema"}
        assert tool["input_schema"] == to_openai_tool(schema)["function"]["parameters"]

    def test_required_lists_only_immediate_children_in_order(self, schema: ToolSchema) -> None:
        """Each object's required list holds its own required children in source order."""
        params = to_openai_tool(schema)["function"]["parameters"]

        assert params["required"] == ["action"]
        assert params["properties"]["details"]["required"] == ["file_paths", "timeout"]

    def test_required_omitted_when_none_required(self) -> None:
        """No required key is emitted when no child is required."""
        schema = ToolSchema.parse({"name": "t", "inputs": [{"name": "a", "type": "string"}]})

        assert "required" not in to_openai_tool(schema)["function"]["parameters"]

    def test_array_item_becomes_items(self, schema: ToolSchema) -> None:
        """Arrays lower their item spec to items."""
        details = to_openai_tool(schema)["function"]["parameters"]["properties"]["details"]

        assert details["properties"]["file_paths"]["type"] == "array"
        assert details["properties"]["file_paths"]["items"]["type"] == "string"

    def test_enum_passes_through(self, schema: ToolSchema) -> None:
        """Enum members keep their case."""
        params = to_openai_tool(schema)["function"]["parameters"]

        assert params["properties"]["action"]["enum"] == ["run_command", "message"]
        assert params["properties"]["action"]["type"] == "string"


class TestGeminiFamily:
    """Gemini upper-cases types and enum members and has no wrapper."""

    def test_types_and_enums_upper_cased(self, schema: ToolSchema) -> None:
        """Every type and enum member is upper-cased at every level."""
        lowered = to_gemini_schema(schema)

        assert lowered["type"] == "OBJECT"
        assert lowered["properties"]["action"]["type"] == "STRING"
        assert lowered["properties"]["action"]["enum"] == ["RUN_COMMAND", "MESSAGE"]
        details = lowered["properties"]["details"]
        assert details["type"] == "OBJECT"
        assert details["properties"]["file_paths"]["items"]["type"] == "STRING"
        assert details["properties"]["timeout"]["type"] == "NUMBER"

    def test_same_tree_as_function_family(self, schema: ToolSchema) -> None:
        """Apart from casing, the Gemini tree matches the function-calling tree."""
        gemini = to_gemini_schema(schema)
        openai = to_openai_tool(schema)["function"]["parameters"]

        assert gemini["required"] == openai["required"]
        assert list(gemini["properties"]) == list(openai["properties"])


class TestToProviderSchema:
    """Dispatch by provider identifier."""

    @pytest.mark.parametrize("provider", ["openai", "deepseek"])
    def test_function_providers(self, schema: ToolSchema, provider: str) -> None:
        assert to_provider_schema(schema, provider) == to_openai_tool(schema)

    def test_accepts_raw_mapping(self) -> None:
        """Raw schema data is validated and translated."""
        assert to_provider_schema(NESTED_SCHEMA, "anthropic")["name"] == "respond"

    def test_unknown_provider(self, schema: ToolSchema) -> None:
        with pytest.raises(UnknownProviderError):
            to_provider_schema(schema, "mistral")

    def test_malformed_object_fails_before_translation(self) -> None:
        """An object without properties is rejected at validation."""
        bad = {"name": "t", "inputs": [{"name": "o", "type": "object"}]}

        with pytest.raises(SchemaValidationError):
            to_provider_schema(bad, "openai")

    def test_malformed_array_fails_before_translation(self) -> None:
        bad = {"name": "t", "inputs": [{"name": "a", "type": "array"}]}

        with pytest.raises(SchemaValidationError):
            to_provider_schema(bad, "gemini")
