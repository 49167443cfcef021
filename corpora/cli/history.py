"""Persistent chat sessions."""

from __future__ import annotations

import abc
import json
import os
from pathlib import Path
from typing import Iterable

from corpora.client.models import MessageSchema

_SUFFIX = ".json"


class ChatHistory(abc.ABC):
    """Storage for named chat sessions."""

    @abc.abstractmethod
    def save_session(self, session_name: str, messages: Iterable[MessageSchema]) -> None:
        """Store the messages of a session, replacing what was there."""

    @abc.abstractmethod
    def load_session(self, session_name: str) -> list[MessageSchema]:
        """Return the messages of a stored session."""

    @abc.abstractmethod
    def list_sessions(self) -> list[str]:
        """Return the names of all stored sessions."""


class FileChatHistory(ChatHistory):
    """Keeps each session as a JSON file in one directory."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _session_file(self, session_name: str) -> Path:
        return self.directory / f"{session_name}{_SUFFIX}"

    def save_session(self, session_name: str, messages: Iterable[MessageSchema]) -> None:
        payload = [message.to_dict() for message in messages]
        with open(self._session_file(session_name), "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, separators=(",", ":"))

    def load_session(self, session_name: str) -> list[MessageSchema]:
        """Raise FileNotFoundError if absent, ValueError if the file is malformed."""
        with open(self._session_file(session_name), encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, list):
            raise ValueError("a session file must hold a list of messages")
        return [MessageSchema.from_dict(item) for item in payload]

    def list_sessions(self) -> list[str]:
        return sorted(
            entry.name[: -len(_SUFFIX)]
            for entry in self.directory.iterdir()
            if entry.name.endswith(_SUFFIX)
        )