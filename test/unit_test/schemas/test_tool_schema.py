"""Tests for the provider-agnostic tool schema model."""

import json
from pathlib import Path

import pytest

from debug_assistant.errors import SchemaValidationError
from debug_assistant.schemas.tool_schema import InputType, ToolSchema


class TestToolSchemaParse:
    def test_nested_schema(self) -> None:
        schema = ToolSchema.parse(
            {
                "name": "respond",
                "description": "Next action",
                "inputs": [
                    {"name": "action", "type": "string", "required": True, "enum": ["message", "run_command"]},
                    {
                        "name": "details",
                        "type": "object",
                        "properties": [
                            {"name": "file_paths", "type": "array", "item": {"name": "path", "type": "string"}},
                            {"name": "timeout", "type": "number"},
                        ],
                    },
                ],
            }
        )

        action, details = schema.inputs
        assert action.required is True
        assert action.enum == ["message", "run_command"]
        assert details.type is InputType.OBJECT
        assert details.properties[0].item.type is InputType.STRING
        assert details.properties[1].required is False

    @pytest.mark.parametrize(
        "spec",
        [
            {"name": "obj", "type": "object"},
            {"name": "obj", "type": "object", "properties": []},
            {"name": "arr", "type": "array"},
            {"name": "arr", "type": "array", "item": {"name": "x", "type": "string"}, "enum": ["a"]},
            {"name": "s", "type": "string", "item": {"name": "x", "type": "string"}},
            {"name": "n", "type": "number", "properties": [{"name": "x", "type": "string"}]},
            {"name": "b", "type": "boolean"},
            {"name": "", "type": "string"},
        ],
    )
    def test_invalid_inputs(self, spec) -> None:
        with pytest.raises(SchemaValidationError):
            ToolSchema.parse({"name": "tool", "inputs": [spec]})

    def test_missing_name(self) -> None:
        with pytest.raises(SchemaValidationError, match="Invalid tool schema"):
            ToolSchema.parse({"inputs": []})

    def test_error_in_nested_array_item(self) -> None:
        with pytest.raises(SchemaValidationError):
            ToolSchema.parse(
                {"name": "tool", "inputs": [{"name": "list", "type": "array", "item": {"name": "o", "type": "object"}}]}
            )


class TestToolSchemaFromFile:
    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"name": "command_evaluation", "inputs": [{"name": "is_ok", "type": "string"}]}))

        assert ToolSchema.from_file(path).name == "command_evaluation"

    def test_not_an_object(self, tmp_path: Path) -> None:
        path = tmp_path / "schema.json"
        path.write_text("[1, 2]")

        with pytest.raises(SchemaValidationError, match="must contain a JSON object"):
            ToolSchema.from_file(path)

    def test_missing_file_is_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            ToolSchema.from_file(tmp_path / "absent.json")
