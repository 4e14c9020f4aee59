import pytest

from debug_assistant.schemas.actions import Action, ActionKind


class TestAction:
    @pytest.mark.parametrize(
        "token, kind",
        [
            ("request_file", ActionKind.REQUEST_FILE),
            ("UPDATE_FILE", ActionKind.UPDATE_FILE),
            ("  Run_Command ", ActionKind.RUN_COMMAND),
            ("request_input", ActionKind.REQUEST_INPUT),
            ("issue_resolved", ActionKind.ISSUE_RESOLVED),
            ("message", ActionKind.MESSAGE),
        ],
    )
    def test_known_tokens(self, token, kind) -> None:
        assert Action(action=token).kind is kind

    def test_unknown_and_missing_tokens(self) -> None:
        assert Action(action="deploy").kind is None
        assert Action().kind is None
        assert Action().action is None

    def test_details_must_be_mapping(self) -> None:
        assert Action(action="message", details="oops").details == {}
        assert Action(action="message", details=None).details == {}

    def test_message_is_stringified(self) -> None:
        assert Action(action="message", message=42).message == "42"

    def test_extra_keys_ignored(self) -> None:
        action = Action.model_validate({"action": "message", "message": "hi", "confidence": 0.9})

        assert action.message == "hi"

    def test_plain_message(self) -> None:
        action = Action.plain_message("free text")

        assert action.kind is ActionKind.MESSAGE
        assert action.message == "free text"
        assert action.details == {}


class TestActionDetails:
    def test_detail_str(self) -> None:
        action = Action(action="run_command", details={"command": "ls", "retries": 3})

        assert action.detail_str("command") == "ls"
        assert action.detail_str("retries") == "3"
        assert action.detail_str("missing") is None

    @pytest.mark.parametrize(
        "value, expected",
        [
            (["a.py", "b.py"], ["a.py", "b.py"]),
            ("a.py", ["a.py"]),
            ("", []),
            (None, []),
            ((1, 2), ["1", "2"]),
        ],
    )
    def test_detail_list(self, value, expected) -> None:
        assert Action(action="request_file", details={"file_paths": value}).detail_list("file_paths") == expected
