"""Command line entry point: ``debug-assistant [SESSION_FILE]``.

Wires settings, logging, prompts, the provider adapter, the safety gate and the
dispatcher together, then runs the conversation until the operator confirms
the issue is resolved. Provider failures end the session with exit status 1
after printing where the log is and how to resume.
"""

import argparse
import dataclasses
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import httpx

from debug_assistant import __version__
from debug_assistant.core.config import Settings
from debug_assistant.core.logging_config import get_logger, setup_logging
from debug_assistant.dispatcher.dispatcher import ActionDispatcher
from debug_assistant.dispatcher.operator import ConsoleOperator, NoticeKind, Operator
from debug_assistant.dispatcher.safety import SafetyGate
from debug_assistant.errors import ConfigurationError, ProviderError, UnknownProviderError
from debug_assistant.prompts.loader import GENERAL_USE_CASE, PromptLibrary, load_response_schema
from debug_assistant.prompts.use_cases import PromptSelector
from debug_assistant.providers.base import ProviderId
from debug_assistant.providers.registry import ProviderRegistry, default_registry
from debug_assistant.schemas.messages import Message
from debug_assistant.session.context import SessionContext
from debug_assistant.session.store import ConversationStore

logger = get_logger(__name__)

PROGRAM = "debug-assistant"
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROGRAM, description="AI-assisted debugging session in the current directory")
    parser.add_argument("session_file", nargs="?", help="Conversation file of a previous session to resume")
    parser.add_argument("-p", "--provider", choices=[p.value for p in ProviderId], help="AI provider (overrides DEBUGGER_AI_PROVIDER)")
    parser.add_argument("-u", "--use-case", help="Use case to start with instead of the interactive menu")
    parser.add_argument("--prompt", help="Opening prompt; skips the interactive questions")
    parser.add_argument("--show-config", action="store_true", help="Print the effective configuration and exit")
    parser.add_argument("--log-level", help="Session log file level (overrides DEBUGGER_LOG_LEVEL)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def show_config(settings: Settings, provider: str, operator: Operator) -> int:
    for line in settings.describe(provider):
        operator.notify(line, NoticeKind.INFO)
    problems = settings.validate_setup(provider)
    for problem in problems:
        operator.notify(problem, NoticeKind.WARNING)
    return EXIT_OK if not problems else EXIT_FAILURE


def resume_messages(path: Path, operator: Operator) -> Tuple[List[Message], Optional[str]]:
    """Messages and use case of a previous session; empty when it cannot be resumed."""
    record = ConversationStore(path).load()
    if record is None or not record.messages:
        operator.notify(f"Cannot resume from {path}, starting new conversation", NoticeKind.WARNING)
        return [], None
    use_case = record.use_case or GENERAL_USE_CASE
    operator.notify(f"Resuming previous session from {path} (Use case: {use_case})", NoticeKind.INFO)
    return list(record.messages), use_case


def opening_prompt(args: argparse.Namespace, selector: PromptSelector) -> Tuple[str, str]:
    if args.prompt:
        return args.prompt, args.use_case or GENERAL_USE_CASE
    if args.use_case:
        return selector.prompt_for(args.use_case), args.use_case
    return selector.choose()


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    settings: Optional[Settings] = None,
    operator: Optional[Operator] = None,
    registry: ProviderRegistry = default_registry,
    client: Optional[httpx.Client] = None,
) -> int:
    """Run a debug session.

    Args:
        argv: Command line arguments, defaults to ``sys.argv[1:]``
        settings: Settings to use instead of loading them from the environment
        operator: Human-facing side, defaults to the console
        registry: Provider registry to build adapters from
        client: Shared httpx client for the adapters; owned by the caller

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    settings = settings or Settings()
    operator = operator or ConsoleOperator()

    try:
        provider = ProviderId.parse(args.provider or settings.provider).value
    except UnknownProviderError as e:
        operator.notify(str(e), NoticeKind.ERROR)
        return EXIT_USAGE

    if args.show_config:
        return show_config(settings, provider, operator)

    messages: List[Message] = []
    use_case: Optional[str] = None
    if args.session_file:
        messages, use_case = resume_messages(Path(args.session_file), operator)

    context = SessionContext(provider=provider, working_dir=Path.cwd(), logs_dir=settings.logs_dir)
    setup_logging(args.log_level or settings.log_level, settings.log_format, context.log_file)
    operator.notify(f"Debug session {context.session_id} started with {provider.capitalize()}", NoticeKind.INFO)
    operator.notify(f"Logs will be saved to {context.log_file}", NoticeKind.DEBUG)
    operator.notify(f"Conversation will be saved to {context.conversation_file}", NoticeKind.DEBUG)

    library = PromptLibrary(settings.prompts_dir, settings.system_prompt_path)
    try:
        if not messages:
            prompt, use_case = opening_prompt(args, PromptSelector(library, operator))
            messages = [Message.user(prompt)]
        context = dataclasses.replace(context, use_case=use_case or GENERAL_USE_CASE)
        system_prompt = library.system_prompt_for(context.use_case)
        schema = load_response_schema(settings.response_schema_path)
    except ConfigurationError as e:
        operator.notify(str(e), NoticeKind.ERROR)
        return EXIT_FAILURE
    except (KeyboardInterrupt, EOFError):
        operator.notify("Session cancelled", NoticeKind.WARNING)
        return EXIT_INTERRUPTED

    logger.info(f"Starting session with {provider} provider for use case: {context.use_case}")
    logger.info(f"Initial user prompt: {messages[0].content}")

    config = settings.build_provider_config(provider, system_prompt=system_prompt, schema=schema)
    adapter = registry.create(config, client=client)
    gate = SafetyGate.for_provider(config, context.working_dir, registry=registry, client=client)
    dispatcher = ActionDispatcher(
        adapter,
        ConversationStore(context.conversation_file),
        context,
        operator,
        messages,
        safety_gate=gate,
        command_timeout=settings.command_timeout,
    )

    try:
        dispatcher.save()
        dispatcher.run()
    except ProviderError as e:
        logger.error(f"API call failed: {e}")
        operator.notify(f"API call failed: {e}", NoticeKind.ERROR)
        _print_locations(operator, context)
        return EXIT_FAILURE
    except (KeyboardInterrupt, EOFError):
        logger.warning("Session interrupted by the operator")
        operator.notify("Session interrupted", NoticeKind.WARNING)
        _print_locations(operator, context)
        return EXIT_INTERRUPTED
    finally:
        if client is None:
            adapter.close()
            gate.adapter.close()

    _print_locations(operator, context)
    return EXIT_OK


def _print_locations(operator: Operator, context: SessionContext) -> None:
    operator.notify(f"Check log file for details: {context.log_file}", NoticeKind.INFO)
    operator.notify(f"Conversation saved to {context.conversation_file}", NoticeKind.INFO)
    operator.notify(f"You can resume this session with: {context.resume_command(PROGRAM)}", NoticeKind.INFO)
