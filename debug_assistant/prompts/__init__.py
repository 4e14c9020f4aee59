"""System prompts, prompt templates and opening-prompt selection."""

from .loader import (
    GENERAL_USE_CASE,
    PromptLibrary,
    fill_template,
    load_response_schema,
    template_placeholders,
)
from .use_cases import BUILTIN_USE_CASES, CUSTOM_USE_CASE, PromptSelector, UseCase, ask_multiline

__all__ = [
    "BUILTIN_USE_CASES",
    "CUSTOM_USE_CASE",
    "GENERAL_USE_CASE",
    "PromptLibrary",
    "PromptSelector",
    "UseCase",
    "ask_multiline",
    "fill_template",
    "load_response_schema",
    "template_placeholders",
]
