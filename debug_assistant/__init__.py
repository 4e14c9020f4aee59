"""AI Debug Assistant.

This package lets an operator work through a software problem together with a
large-language-model agent. The agent answers every turn with one structured
action (read files, write a file, run a shell command, ask a question, or
declare the issue resolved) and the assistant carries that action out locally.

High-level architecture
-----------------------

The codebase is organized around two layers:

- **Provider abstraction**: one adapter per model vendor (Anthropic, OpenAI,
  Gemini, DeepSeek) that turns the vendor's chat-completion and tool-calling
  wire format into a single contract: a conversation goes in, either free text
  or decoded structured arguments come out.
- **Action dispatch**: a small state machine that decodes the model's action,
  performs the side effect against the filesystem or shell, and produces the
  next user-role message. Shell commands pass through an AI safety gate with a
  human override before they run.

Core subpackages
----------------

- ``debug_assistant.core``: settings and logging configuration.
- ``debug_assistant.schemas``: pydantic models for messages, sessions, actions
  and provider-agnostic tool schemas.
- ``debug_assistant.providers``: schema translation, the four adapters and the
  provider registry.
- ``debug_assistant.session``: session context and the resumable
  conversation store.
- ``debug_assistant.dispatcher``: action decoding, side-effect handlers, the
  safety gate and the dispatcher loop.
- ``debug_assistant.prompts``: system prompts, prompt templates and the
  response schema loaded from the debugger directory.

Typical workflow
----------------

1. Load ``Settings`` and create a ``SessionContext``.
2. Build a ``ProviderConfig`` and create the adapter through ``ProviderRegistry``.
3. Seed the conversation with the operator's initial prompt.
4. Run ``ActionDispatcher.run()`` until the operator confirms the issue is
   resolved. The conversation file written after each turn can be passed back
   on the command line to resume.
"""

__version__ = "0.1.0"
