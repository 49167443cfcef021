"""The `chat` command: converse with the corpus."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from rich.markdown import Markdown

from corpora.cli.context import Context
from corpora.client import corpus_api
from corpora.client.base import ApiError
from corpora.client.models import CorpusChatSchema, MessageSchema


@dataclass(frozen=True)
class Guidance:
    """The voice, purpose and structure notes kept in `.corpora`."""

    voice: str = ""
    purpose: str = ""
    structure: str = ""


def _read_or_empty(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def load_guidance(root_path: str | os.PathLike[str]) -> Guidance:
    """Read the guidance notes; a missing or unreadable note is empty."""
    base = Path(root_path) / ".corpora"
    return Guidance(
        voice=_read_or_empty(base / "VOICE.md"),
        purpose=_read_or_empty(base / "PURPOSE.md"),
        structure=_read_or_empty(base / "STRUCTURE.md"),
    )


def load_messages(ctx: Context, persist: str | None) -> list[MessageSchema]:
    """Return the stored messages of a session, or an empty history."""
    if persist is None:
        ctx.dim("No persistence specified. Starting a new session.")
        return []
    try:
        messages = ctx.history.load_session(persist)
    except (OSError, ValueError):
        ctx.warn(f"No existing session found for: {persist}")
        return []
    ctx.success(f"Loaded session: {persist}")
    for message in messages:
        ctx.dim(f"{message.role}: {message.text}")
    return messages


def run(ctx: Context, persist: str | None = None, list_sessions: bool = False) -> None:
    """List sessions, or chat until the editor fails or the user interrupts."""
    if list_sessions:
        sessions = ctx.history.list_sessions()
        ctx.success("Available sessions:")
        for session in sessions:
            ctx.dim(session)
        return

    messages = load_messages(ctx, persist)

    while True:
        ctx.magenta("Opening editor for user input...")
        user_input = ctx.get_user_input_via_editor("Put your prompt here, save and close")
        messages.append(MessageSchema(role="user", text=user_input.strip()))

        ctx.success("Thinking...")
        guidance = load_guidance(ctx.corpora_config.root_path)
        corpus_id = ctx.corpora_config.id
        if corpus_id is None:
            raise RuntimeError("Failed to get corpus ID")

        chat_request = CorpusChatSchema(
            corpus_id=corpus_id,
            messages=list(messages),
            voice=guidance.voice,
            purpose=guidance.purpose,
            structure=guidance.structure,
        )
        try:
            response = corpus_api.chat(ctx.api_config, chat_request)
        except ApiError as exc:
            ctx.error(f"Failed to get response: {exc}")
            continue

        ctx.console.print(Markdown(response))
        messages.append(MessageSchema(role="assistant", text=response))

        if persist is not None:
            try:
                ctx.history.save_session(persist, messages)
            except OSError as exc:
                ctx.error(f"Failed to save session '{persist}': {exc}")