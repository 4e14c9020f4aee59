"""Built-in use cases and the interactive selection of the opening prompt."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from debug_assistant.core.logging_config import get_logger
from debug_assistant.dispatcher.operator import NoticeKind, Operator

from .loader import GENERAL_USE_CASE, PromptLibrary, fill_template

logger = get_logger(__name__)

CUSTOM_USE_CASE = "custom"
SKIP_HINT = " (press Enter to skip):"


@dataclass(frozen=True)
class FollowUp:
    """Optional question whose non-empty answer is formatted into ``sentence``."""

    question: str
    sentence: str


@dataclass(frozen=True)
class UseCase:
    """A built-in use case: menu label plus the questions that compose its prompt."""

    key: str
    label: str
    question: str
    opening: str
    closing: str
    follow_ups: List[FollowUp] = field(default_factory=list)

    def compose(self, description: str, answers: List[str]) -> str:
        prompt = self.opening.format(description)
        for follow_up, answer in zip(self.follow_ups, answers):
            if answer:
                prompt += follow_up.sentence.format(answer)
        return prompt + self.closing


BUILTIN_USE_CASES: List[UseCase] = [
    UseCase(
        key="debugging",
        label="Debug code issue",
        question="Describe the problem you're facing:",
        opening="I'm facing an issue where {}. ",
        closing="Can you help me debug this?",
        follow_ups=[
            FollowUp("Which file should I start looking at?", "The feature is rendered by the component in {}. "),
        ],
    ),
    UseCase(
        key="feature",
        label="Design a new feature",
        question="Describe the feature you want to implement:",
        opening="I need to implement a new feature: {}. ",
        closing="Can you help me design and implement this feature?",
        follow_ups=[
            FollowUp("What technologies are you using?", "I'm using {}. "),
            FollowUp("Any specific constraints or requirements?", "The following constraints apply: {}. "),
        ],
    ),
    UseCase(
        key="refactoring",
        label="Refactor existing code",
        question="Describe what code you want to refactor:",
        opening="I need to refactor some code: {}. ",
        closing="Can you help me improve this code?",
        follow_ups=[
            FollowUp("Which file contains the code to refactor?", "The code is in {}. "),
            FollowUp("What are your refactoring goals?", "My refactoring goals are: {}. "),
        ],
    ),
    UseCase(
        key="performance",
        label="Optimize performance",
        question="Describe the performance issue:",
        opening="I'm experiencing performance issues: {}. ",
        closing="Can you help me optimize this for better performance?",
        follow_ups=[
            FollowUp("Any metrics or measurements?", "Here are the metrics: {}. "),
        ],
    ),
    UseCase(
        key="explanation",
        label="Explain complex code",
        question="Describe the code you need explained:",
        opening="I need to understand the following code: {}. ",
        closing="Can you explain how it works and what it's doing?",
        follow_ups=[
            FollowUp("Which file contains this code?", "It's located in {}. "),
        ],
    ),
    UseCase(
        key="security",
        label="Fix security vulnerability",
        question="Describe the security vulnerability:",
        opening="I've identified a security vulnerability: {}. ",
        closing="Can you help me fix this security issue?",
        follow_ups=[
            FollowUp("Which file is affected?", "It affects the code in {}. "),
        ],
    ),
]

BUILTIN_KEYS = [use_case.key for use_case in BUILTIN_USE_CASES]


def find_use_case(key: str) -> Optional[UseCase]:
    return next((use_case for use_case in BUILTIN_USE_CASES if use_case.key == key), None)


def ask_multiline(operator: Operator, prompt: str) -> str:
    """Collect lines until an empty one and join them."""
    lines: List[str] = []
    line = operator.ask(prompt)
    while line:
        lines.append(line)
        line = operator.ask("")
    return "\n".join(lines)


class PromptSelector:
    """Interactive menu producing the opening user message and its use case."""

    def __init__(self, library: PromptLibrary, operator: Operator) -> None:
        self._library = library
        self._operator = operator

    def extra_templates(self) -> List[str]:
        """Templates offered as their own menu entries (built-in names excluded)."""
        return [name for name in self._library.list_templates() if name not in BUILTIN_KEYS]

    def menu_lines(self) -> List[str]:
        lines = [f"{index}. {use_case.label}" for index, use_case in enumerate(BUILTIN_USE_CASES, start=1)]
        offset = len(BUILTIN_USE_CASES) + 1
        lines += [f"{index}. Template: {name.capitalize()}" for index, name in enumerate(self.extra_templates(), start=offset)]
        lines.append("0. Custom prompt (free-form)")
        return lines

    def choose(self) -> Tuple[str, str]:
        """Show the menu and build the opening prompt.

        Returns:
            ``(prompt, use_case)``
        """
        templates = self.extra_templates()
        for line in self.menu_lines():
            self._operator.notify(line, NoticeKind.INFO)
        last = len(BUILTIN_USE_CASES) + len(templates)
        choice = self._operator.ask(f"Enter your choice (0-{last}):").strip()

        if choice == "0":
            return ask_multiline(self._operator, "Enter your custom prompt:"), CUSTOM_USE_CASE

        try:
            index = int(choice)
        except ValueError:
            index = -1

        if 1 <= index <= len(BUILTIN_USE_CASES):
            use_case = BUILTIN_USE_CASES[index - 1]
            return self.prompt_for(use_case.key), use_case.key

        template_index = index - len(BUILTIN_USE_CASES) - 1
        if 0 <= template_index < len(templates):
            name = templates[template_index]
            template = self._library.load_template(name)
            if template is not None:
                return self.fill(template), name

        logger.info(f"Menu choice {choice!r} does not match an entry; asking for a free-form problem")
        return ask_multiline(self._operator, "What problem are you facing?"), GENERAL_USE_CASE

    def prompt_for(self, key: str) -> str:
        """Build the prompt of a built-in use case, preferring its template when one exists."""
        template = self._library.load_template(key)
        if template is not None:
            return self.fill(template)

        use_case = find_use_case(key)
        if use_case is None:
            return ask_multiline(self._operator, "What problem are you facing?")
        description = ask_multiline(self._operator, use_case.question)
        answers = [self._operator.ask(f"{follow_up.question}{SKIP_HINT}").strip() for follow_up in use_case.follow_ups]
        return use_case.compose(description, answers)

    def fill(self, template: str) -> str:
        def answer(placeholder: str) -> str:
            self._operator.notify(f"Please provide input for: {placeholder}", NoticeKind.USER)
            return self._operator.ask("")

        return fill_template(template, answer)
