"""End-to-end tests of the command line entry point with a scripted operator and mocked provider."""

import json
from pathlib import Path

import httpx
import pytest

from debug_assistant import cli
from debug_assistant.core.config import Settings
from debug_assistant.dispatcher.operator import NoticeKind

MOCK_URL = "https://mock.openai/v1/chat/completions"


def tool_call(payload: dict) -> httpx.Response:
    arguments = json.dumps(payload)
    return httpx.Response(200, json={"choices": [{"message": {"tool_calls": [{"function": {"name": "respond", "arguments": arguments}}]}}]})


RESOLVED = {"action": "issue_resolved", "details": {"solution": "Fixed the import"}}


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    return root


@pytest.fixture
def settings(debugger_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        DEBUGGER_DIR=debugger_dir,
        DEBUGGER_AI_PROVIDER="openai",
        OPENAI_API_KEY="sk-test",
        OPENAI_API_URL=MOCK_URL,
    )


def conversation_files(settings: Settings):
    return sorted(settings.logs_dir.glob("conversation_*.json"))


class TestShowConfig:
    def test_valid_configuration(self, settings, scripted_operator) -> None:
        operator = scripted_operator()

        assert cli.main(["--show-config"], settings=settings, operator=operator) == cli.EXIT_OK
        assert "AI Provider: openai" in operator.shown(NoticeKind.INFO)
        assert operator.shown(NoticeKind.WARNING) == []

    def test_problems_reported(self, settings, scripted_operator) -> None:
        operator = scripted_operator()

        exit_code = cli.main(["--show-config", "--provider", "gemini"], settings=settings, operator=operator)

        assert exit_code == cli.EXIT_FAILURE
        assert operator.shown(NoticeKind.WARNING) == ["gemini API key looks invalid"]

    def test_unknown_configured_provider(self, debugger_dir, scripted_operator) -> None:
        settings = Settings(_env_file=None, DEBUGGER_DIR=debugger_dir, DEBUGGER_AI_PROVIDER="mistral")
        operator = scripted_operator()

        assert cli.main([], settings=settings, operator=operator) == cli.EXIT_USAGE
        assert operator.shown(NoticeKind.ERROR) == ["Unknown provider: mistral"]


class TestSession:
    def test_prompt_to_resolution(self, project, settings, scripted_operator, recording_transport) -> None:
        transport = recording_transport(tool_call(RESOLVED))
        operator = scripted_operator("y")

        exit_code = cli.main(["--prompt", "Tests fail on import"], settings=settings, operator=operator, client=transport.client())

        assert exit_code == cli.EXIT_OK
        body = transport.last_body
        assert body["messages"][0] == {"role": "developer", "content": "You are a careful debugging assistant."}
        assert body["messages"][1] == {"role": "user", "content": "Tests fail on import"}
        assert body["tool_choice"]["function"]["name"] == "respond"

        [saved] = conversation_files(settings)
        data = json.loads(saved.read_text(encoding="utf-8"))
        assert data["metadata"]["provider"] == "openai"
        assert data["metadata"]["use_case_type"] == "general"
        assert [m["role"] for m in data["messages"]] == ["user", "assistant", "user"]
        assert data["messages"][2]["content"] == "y"
        assert f"You can resume this session with: debug-assistant {saved}" in operator.shown(NoticeKind.INFO)

    def test_safe_command_runs_in_working_directory(self, project, settings, scripted_operator, recording_transport) -> None:
        (project / "marker.txt").write_text("x", encoding="utf-8")
        transport = recording_transport(
            tool_call({"action": "run_command", "details": {"command": "ls"}}),
            tool_call({"is_ok": "1"}),
            tool_call(RESOLVED),
        )
        operator = scripted_operator("y")

        exit_code = cli.main(["--prompt", "List files"], settings=settings, operator=operator, client=transport.client())

        assert exit_code == cli.EXIT_OK
        gate_body = json.loads(transport.requests[1].content)
        assert gate_body["messages"][-1] == {"role": "user", "content": "Command: ls"}
        assert str(project) in gate_body["messages"][0]["content"]
        assert transport.last_body["messages"][-1] == {
            "role": "user",
            "content": "Command executed successfully. Output: marker.txt\n",
        }

    def test_use_case_with_specialized_prompt(self, project, settings, debugger_dir, scripted_operator, recording_transport) -> None:
        (debugger_dir / "prompts" / "system" / "security_system_prompt.md").write_text("Security focus.", encoding="utf-8")
        transport = recording_transport(tool_call(RESOLVED))
        operator = scripted_operator("SQL injection in search", "", "search.py", "y")

        exit_code = cli.main(["--use-case", "security"], settings=settings, operator=operator, client=transport.client())

        assert exit_code == cli.EXIT_OK
        body = transport.last_body
        assert body["messages"][0]["content"] == "Security focus."
        assert body["messages"][1]["content"] == (
            "I've identified a security vulnerability: SQL injection in search. "
            "It affects the code in search.py. "
            "Can you help me fix this security issue?"
        )

    def test_provider_error_ends_session(self, project, settings, scripted_operator, recording_transport) -> None:
        transport = recording_transport(httpx.Response(500, json={"error": {"message": "server exploded"}}))
        operator = scripted_operator()

        exit_code = cli.main(["--prompt", "Help"], settings=settings, operator=operator, client=transport.client())

        assert exit_code == cli.EXIT_FAILURE
        assert "API call failed: API error: server exploded" in operator.shown(NoticeKind.ERROR)
        [saved] = conversation_files(settings)
        assert len(json.loads(saved.read_text(encoding="utf-8"))["messages"]) == 1

    def test_missing_schema_is_configuration_error(self, project, settings, debugger_dir, scripted_operator) -> None:
        (debugger_dir / "general_schema.json").unlink()
        operator = scripted_operator()

        assert cli.main(["--prompt", "Help"], settings=settings, operator=operator) == cli.EXIT_FAILURE
        assert operator.shown(NoticeKind.ERROR)[0].startswith("Cannot read response schema")

    def test_closed_input_during_menu(self, project, settings, scripted_operator) -> None:
        operator = scripted_operator()

        assert cli.main([], settings=settings, operator=operator) == cli.EXIT_INTERRUPTED
        assert operator.shown(NoticeKind.WARNING) == ["Session cancelled"]


class TestResume:
    def test_resume_previous_session(self, project, settings, scripted_operator, recording_transport) -> None:
        previous = settings.logs_dir / "conversation_0a0b0c.json"
        previous.write_text(
            json.dumps(
                {
                    "metadata": {"use_case_type": "performance", "session_id": "0a0b0c", "provider": "openai", "timestamp": "t"},
                    "messages": [
                        {"role": "user", "content": "Slow page"},
                        {"role": "assistant", "content": "{\"action\": \"message\"}"},
                        {"role": "user", "content": "Still slow"},
                    ],
                }
            ),
            encoding="utf-8",
        )
        transport = recording_transport(tool_call(RESOLVED))
        operator = scripted_operator("y")

        exit_code = cli.main([str(previous)], settings=settings, operator=operator, client=transport.client())

        assert exit_code == cli.EXIT_OK
        assert operator.shown(NoticeKind.INFO)[0] == f"Resuming previous session from {previous} (Use case: performance)"
        assert [m["content"] for m in transport.last_body["messages"][1:]] == ["Slow page", "{\"action\": \"message\"}", "Still slow"]

        files = conversation_files(settings)
        assert len(files) == 2
        [resumed] = [f for f in files if f != previous]
        data = json.loads(resumed.read_text(encoding="utf-8"))
        assert data["metadata"]["use_case_type"] == "performance"
        assert data["metadata"]["session_id"] != "0a0b0c"
        assert len(data["messages"]) == 5
        assert len(json.loads(previous.read_text(encoding="utf-8"))["messages"]) == 3

    def test_unusable_file_starts_new_conversation(self, project, settings, scripted_operator, recording_transport) -> None:
        broken = settings.logs_dir / "conversation_ffffff.json"
        broken.write_text("{not json", encoding="utf-8")
        transport = recording_transport(tool_call(RESOLVED))
        operator = scripted_operator("0", "My custom problem", "", "y")

        exit_code = cli.main([str(broken)], settings=settings, operator=operator, client=transport.client())

        assert exit_code == cli.EXIT_OK
        assert operator.shown(NoticeKind.WARNING)[0] == f"Cannot resume from {broken}, starting new conversation"
        assert transport.last_body["messages"][1] == {"role": "user", "content": "My custom problem"}


class TestParser:
    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as excinfo:
            cli.build_parser().parse_args(["--version"])

        assert excinfo.value.code == 0
        assert capsys.readouterr().out.startswith("debug-assistant ")

    def test_rejects_unknown_provider_flag(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            cli.build_parser().parse_args(["--provider", "mistral"])

        assert excinfo.value.code == 2
