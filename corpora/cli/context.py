"""Shared state for the commands: configuration, API access and terminal output."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import IO

import requests
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.style import Style

from corpora.cli.collector import Collector, get_collector
from corpora.cli.config import CorporaConfig
from corpora.cli.history import ChatHistory, FileChatHistory
from corpora.client.base import Configuration

REQUEST_TIMEOUT_SECONDS = 60.0
DEFAULT_EDITOR = "vim"

SUCCESS_STYLE = "bold green"
ERROR_STYLE = "bold red"
WARN_STYLE = "bold yellow"
DIM_STYLE = "dim"
MAGENTA_STYLE = "magenta"
HIGHLIGHT_STYLE = "bold green on magenta"


class EditorError(Exception):
    """The external editor could not be used to obtain input."""


class _ProgressBar:
    """A single-task progress bar drawn on a console."""

    def __init__(self, console: Console, length: int, message: str) -> None:
        self._progress = Progress(
            SpinnerColumn(style="green"),
            TimeElapsedColumn(),
            BarColumn(bar_width=40, complete_style="cyan", style="blue"),
            MofNCompleteColumn(),
            TextColumn("{task.description}", markup=False),
            console=console,
        )
        self._task = self._progress.add_task(message, total=length)
        self._progress.start()

    @property
    def _state(self):
        return self._progress.tasks[0]

    @property
    def length(self) -> int:
        return int(self._state.total or 0)

    @property
    def position(self) -> int:
        return int(self._state.completed)

    @property
    def message(self) -> str:
        return self._state.description

    def inc(self, delta: int = 1) -> None:
        self._progress.advance(self._task, delta)

    def set_message(self, message: str) -> None:
        self._progress.update(self._task, description=message)

    def finish_with_message(self, message: str) -> None:
        self._progress.update(self._task, completed=self.length, description=message)
        self._progress.stop()

    def abandon_with_message(self, message: str) -> None:
        self._progress.update(self._task, description=message)
        self._progress.stop()


class Context:
    """Everything a command needs to talk to the user and the server."""

    def __init__(
        self,
        corpora_config: CorporaConfig,
        token: str,
        *,
        collector: Collector | None = None,
        history: ChatHistory | None = None,
        console: Console | None = None,
        stdin: IO[str] | None = None,
    ) -> None:
        self.corpora_config = corpora_config
        self.api_config = Configuration(
            base_path=corpora_config.server.base_url,
            session=requests.Session(),
            bearer_access_token=token,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        self.collector = collector if collector is not None else get_collector(corpora_config)
        self.history = (
            history
            if history is not None
            else FileChatHistory(Path(corpora_config.root_path) / ".corpora" / "chat")
        )
        self.console = console if console is not None else Console()
        self._stdin = stdin

    def print(self, message: str, style: str | Style) -> None:
        """Print one message in the given style."""
        self.console.print(
            message, style=style, markup=False, highlight=False, soft_wrap=True
        )

    def prompt_confirm(self, prompt: str) -> bool:
        """Ask a yes/no question; anything but yes means no.

        Exits the program if no answer can be read.
        """
        stream = self._stdin if self._stdin is not None else sys.stdin
        while True:
            self.console.print(
                f"{prompt} [y/N] ", end="", markup=False, highlight=False
            )
            line = stream.readline()
            if not line:
                print("Failed to get user confirmation", file=sys.stderr)
                raise SystemExit(1)
            answer = line.strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("", "n", "no"):
                return False

    def progress_bar(self, length: int, message: str) -> _ProgressBar:
        """Start and return a progress bar of the given length."""
        return _ProgressBar(self.console, length, message)

    def success(self, message: str) -> None:
        self.print(message, SUCCESS_STYLE)

    def error(self, message: str) -> None:
        self.print(message, ERROR_STYLE)

    def warn(self, message: str) -> None:
        self.print(message, WARN_STYLE)

    def dim(self, message: str) -> None:
        self.print(message, DIM_STYLE)

    def magenta(self, message: str) -> None:
        self.print(message, MAGENTA_STYLE)

    def highlight(self, message: str) -> None:
        self.print(message, HIGHLIGHT_STYLE)

    def get_user_input_via_editor(self, initial_content: str) -> str:
        """Let the user edit text in their editor and return the result."""
        return get_user_input_via_editor(initial_content)


def editor_command(editor: str, path: str | os.PathLike[str]) -> list[str]:
    """Build the command that opens `path` in `editor` and waits for it to close."""
    if "code" in editor or "subl" in editor:
        flags = ["--wait"]
    elif "gedit" in editor:
        flags = ["--standalone"]
    else:
        flags = []
    return [editor, *flags, os.fspath(path)]


def get_user_input_via_editor(initial_content: str) -> str:
    """Open $EDITOR (default vim) on a temporary file and return its final text."""
    try:
        fd, name = tempfile.mkstemp()
    except OSError as exc:
        raise EditorError(f"Failed to create temp file: {exc}") from exc
    path = Path(name)
    try:
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(initial_content)
        except OSError as exc:
            raise EditorError(f"Failed to write to temp file: {exc}") from exc

        editor = os.environ.get("EDITOR", DEFAULT_EDITOR)
        try:
            status = subprocess.run(editor_command(editor, path), check=False)
        except OSError as exc:
            raise EditorError(f"Failed to launch editor '{editor}': {exc}") from exc
        if status.returncode != 0:
            raise EditorError(f"Editor '{editor}' exited with a non-zero status")

        try:
            with open(path, encoding="utf-8", newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise EditorError(f"Failed to read edited file: {exc}") from exc
    finally:
        path.unlink(missing_ok=True)