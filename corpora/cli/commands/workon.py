"""The `workon` command: revise one file of the corpus together with the assistant."""

from __future__ import annotations

import os
from pathlib import Path

from corpora.cli.commands.chat import load_guidance
from corpora.cli.context import Context
from corpora.client import workon_api
from corpora.client.base import ApiError
from corpora.client.models import CorpusFileChatSchema, MessageSchema


def _content_message(intro: str, relative_path: str, content: str) -> MessageSchema:
    return MessageSchema(
        role="user",
        text=f"{intro} `{relative_path}` {'is' if 'current' in intro else 'was'}:\n```\n{content}\n```",
    )


def initial_messages(
    ctx: Context,
    relative_path: str | os.PathLike[str],
    content: str,
    persist: str | None,
) -> list[MessageSchema]:
    """Build the conversation a session starts from.

    A stored session gets the file's current content appended; a fresh
    conversation starts with the file's original content, if it has any.
    A session that cannot be loaded starts empty.
    """
    shown = str(relative_path)
    if persist is not None:
        try:
            messages = ctx.history.load_session(persist)
        except (OSError, ValueError):
            ctx.warn(f"No existing session found for: {persist}")
            return []
        ctx.success(f"Loaded session: {persist}")
        for message in messages:
            ctx.dim(f"{message.role}: {message.text}")
        if content:
            messages.append(_content_message("The current content of", shown, content))
        return messages
    if content:
        return [_content_message("The original content of", shown, content)]
    return []


def read_directions(root_path: str | os.PathLike[str], ext: str) -> str:
    """Read the directions kept for files with this extension, or return ''."""
    path = Path(root_path) / ".corpora" / ext / "DIRECTIONS.md"
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def _read_or_create(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        path.write_bytes(b"")
        return ""


def run(ctx: Context, path: str | os.PathLike[str], persist: str | None = None) -> None:
    """Ask for revisions of a file until the editor fails or the user stops."""
    target = Path(path)
    cwd = Path.cwd()
    ctx.dim(f"Current working directory: {cwd}")
    absolute_path = cwd / target
    try:
        relative_path = absolute_path.relative_to(Path(ctx.corpora_config.root_path))
    except ValueError as exc:
        raise ValueError("Failed to get relative path") from exc

    ctx.magenta(f"Working on file: {relative_path}")
    ext = relative_path.suffix[1:]

    current_content = _read_or_create(target)
    ctx.success("Current file content:")
    ctx.dim(current_content)

    messages = initial_messages(ctx, relative_path, current_content, persist)

    while True:
        user_input = ctx.get_user_input_via_editor(
            f"Put your prompt here for {target}, save and close"
        )
        messages.append(MessageSchema(role="user", text=user_input.strip()))

        ctx.success("Generating revision...")
        root_path = ctx.corpora_config.root_path
        guidance = load_guidance(root_path)
        directions = read_directions(root_path, ext)
        corpus_id = ctx.corpora_config.id
        if corpus_id is None:
            raise RuntimeError("Failed to get corpus ID")

        file_request = CorpusFileChatSchema(
            corpus_id=corpus_id,
            messages=list(messages),
            path=str(relative_path),
            voice=guidance.voice,
            purpose=guidance.purpose,
            structure=guidance.structure,
            directions=directions,
        )
        try:
            revision = workon_api.file(ctx.api_config, file_request)
        except ApiError as exc:
            ctx.error(f"Failed to generate revision: {exc}")
            continue

        ctx.dim(revision)
        ctx.highlight(f"^^Revision for `{relative_path}`^^")
        messages.append(MessageSchema(role="assistant", text=revision))

        if persist is not None:
            try:
                ctx.history.save_session(persist, messages)
            except OSError as exc:
                ctx.error(f"Failed to save session '{persist}': {exc}")

        if ctx.prompt_confirm("Write file?"):
            target.write_bytes(revision.encode("utf-8"))
            ctx.success("File written!")
        else:
            ctx.warn("You chose not to write the file. Give more input to revise.")