from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import httpx
import pytest

from debug_assistant.dispatcher.operator import NoticeKind


class ScriptedOperator:
    """Operator answering prompts from a fixed script and recording everything shown."""

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self.answers: List[str] = list(answers)
        self.prompts: List[str] = []
        self.notices: List[Tuple[NoticeKind, str]] = []

    def notify(self, text: str, kind: NoticeKind = NoticeKind.INFO) -> None:
        self.notices.append((kind, text))

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError(f"No scripted answer left for prompt: {prompt!r}")
        return self.answers.pop(0)

    def shown(self, kind: Optional[NoticeKind] = None) -> List[str]:
        return [text for k, text in self.notices if kind is None or k is kind]


class RecordingTransport:
    """httpx MockTransport wrapper that records requests and replays queued responses."""

    def __init__(self, responses: Iterable[httpx.Response | Callable[[httpx.Request], httpx.Response]] = ()) -> None:
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(500, json={"error": {"message": "no scripted response"}})
        response = self.responses.pop(0)
        return response(request) if callable(response) else response

    @property
    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def scripted_operator() -> Callable[..., ScriptedOperator]:
    def _make(*answers: str) -> ScriptedOperator:
        return ScriptedOperator(answers)

    return _make


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    def _make(*responses: Any) -> RecordingTransport:
        return RecordingTransport(responses)

    return _make


@pytest.fixture
def debugger_dir(tmp_path: Path) -> Path:
    """A populated debugger directory with default prompt and response schema."""
    root = tmp_path / "debugger"
    (root / "prompts" / "system").mkdir(parents=True)
    (root / "prompts" / "templates").mkdir(parents=True)
    (root / "logs").mkdir()
    (root / "system_prompt.md").write_text("You are a careful debugging assistant.", encoding="utf-8")
    (root / "general_schema.json").write_text(
        json.dumps(
            {
                "name": "respond",
                "description": "Respond with the next action",
                "inputs": [
                    {
                        "name": "action",
                        "type": "string",
                        "required": True,
                        "enum": ["request_file", "update_file", "run_command", "request_input", "issue_resolved", "message"],
                    },
                    {"name": "message", "type": "string"},
                ],
            }
        ),
        encoding="utf-8",
    )
    return root


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
    )

    orig_sync = httpx._client.Client.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo handler changes made by ``setup_logging`` inside a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
