"""Request and response schemas exchanged with the corpora API."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping


class _Unset(enum.Enum):
    """Marks a field that is absent, as opposed to present and null."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


_UNSET = _Unset.UNSET


def _require(data: Mapping[str, Any], key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _check_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string, got {value!r}")
    return value


def _string(data: Mapping[str, Any], key: str) -> str:
    return _check_str(_require(data, key), key)


def _optional_string(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    return None if value is None else _check_str(value, key)


def _check_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{key}` must be an integer, got {value!r}")
    return value


def _uuid(data: Mapping[str, Any], key: str) -> uuid.UUID:
    value = _require(data, key)
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(_check_str(value, key))
    except ValueError as exc:
        raise ValueError(f"field `{key}` is not a valid UUID: {value!r}") from exc


def _messages(data: Mapping[str, Any]) -> list[MessageSchema]:
    value = _require(data, "messages")
    if not isinstance(value, list):
        raise ValueError("field `messages` must be a list")
    return [MessageSchema.from_dict(item) for item in value]


def _string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list):
        raise ValueError(f"field `{key}` must be a list")
    return [_check_str(item, key) for item in value]


def _put_optional(out: dict[str, Any], **values: Any) -> dict[str, Any]:
    out.update((key, value) for key, value in values.items() if value is not None)
    return out


@dataclass
class MessageSchema:
    """One chat message with its role."""

    role: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "text": self.text}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MessageSchema:
        return cls(role=_string(data, "role"), text=_string(data, "text"))


@dataclass
class CorpusChatSchema:
    """A chat request against a whole corpus."""

    corpus_id: str
    messages: list[MessageSchema]
    voice: str | None = None
    purpose: str | None = None
    structure: str | None = None
    directions: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out = {
            "corpus_id": self.corpus_id,
            "messages": [message.to_dict() for message in self.messages],
        }
        return _put_optional(
            out,
            voice=self.voice,
            purpose=self.purpose,
            structure=self.structure,
            directions=self.directions,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CorpusChatSchema:
        return cls(
            corpus_id=_string(data, "corpus_id"),
            messages=_messages(data),
            voice=_optional_string(data, "voice"),
            purpose=_optional_string(data, "purpose"),
            structure=_optional_string(data, "structure"),
            directions=_optional_string(data, "directions"),
        )


@dataclass
class CorpusFileChatSchema:
    """A chat request about one file of a corpus."""

    corpus_id: str
    messages: list[MessageSchema]
    path: str
    voice: str | None = None
    purpose: str | None = None
    structure: str | None = None
    directions: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out = {
            "corpus_id": self.corpus_id,
            "messages": [message.to_dict() for message in self.messages],
        }
        _put_optional(
            out,
            voice=self.voice,
            purpose=self.purpose,
            structure=self.structure,
            directions=self.directions,
        )
        out["path"] = self.path
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CorpusFileChatSchema:
        return cls(
            corpus_id=_string(data, "corpus_id"),
            messages=_messages(data),
            path=_string(data, "path"),
            voice=_optional_string(data, "voice"),
            purpose=_optional_string(data, "purpose"),
            structure=_optional_string(data, "structure"),
            directions=_optional_string(data, "directions"),
        )


def _nullable_url(data: Mapping[str, Any]) -> str | None | _Unset:
    if "url" not in data:
        return _UNSET
    value = data["url"]
    return None if value is None else _check_str(value, "url")


@dataclass
class CorpusResponseSchema:
    """A corpus as returned by the server."""

    id: uuid.UUID
    name: str
    created_at: str
    updated_at: str
    url: str | None | _Unset = _UNSET

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": str(self.id), "name": self.name}
        if self.url is not _UNSET:
            out["url"] = self.url
        out["created_at"] = self.created_at
        out["updated_at"] = self.updated_at
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CorpusResponseSchema:
        return cls(
            id=_uuid(data, "id"),
            name=_string(data, "name"),
            created_at=_string(data, "created_at"),
            updated_at=_string(data, "updated_at"),
            url=_nullable_url(data),
        )


@dataclass
class CorpusSchema:
    """The name and optional repository URL of a corpus."""

    name: str
    url: str | None | _Unset = _UNSET

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        if self.url is not _UNSET:
            out["url"] = self.url
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CorpusSchema:
        return cls(name=_string(data, "name"), url=_nullable_url(data))


@dataclass
class CorpusUpdateFilesSchema:
    """The files to delete when updating a corpus."""

    delete_files: list[str] | None | _Unset = _UNSET

    def to_dict(self) -> dict[str, Any]:
        if self.delete_files is _UNSET:
            return {}
        if self.delete_files is None:
            return {"delete_files": None}
        return {"delete_files": list(self.delete_files)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CorpusUpdateFilesSchema:
        if not isinstance(data, Mapping):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        if "delete_files" not in data:
            return cls()
        value = data["delete_files"]
        if value is None:
            return cls(delete_files=None)
        return cls(delete_files=_string_list(value, "delete_files"))


@dataclass
class FileResponseSchema:
    """A corpus file as returned by the server."""

    id: uuid.UUID
    corpus_id: uuid.UUID
    path: str
    content: str
    checksum: str
    created_at: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "corpus_id": str(self.corpus_id),
            "path": self.path,
            "content": self.content,
            "checksum": self.checksum,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileResponseSchema:
        return cls(
            id=_uuid(data, "id"),
            corpus_id=_uuid(data, "corpus_id"),
            path=_string(data, "path"),
            content=_string(data, "content"),
            checksum=_string(data, "checksum"),
            created_at=_string(data, "created_at"),
            updated_at=_string(data, "updated_at"),
        )


@dataclass
class FileSchema:
    """A new file to add to a corpus."""

    path: str
    content: str
    corpus_id: uuid.UUID

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "content": self.content,
            "corpus_id": str(self.corpus_id),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileSchema:
        return cls(
            path=_string(data, "path"),
            content=_string(data, "content"),
            corpus_id=_uuid(data, "corpus_id"),
        )


@dataclass
class IssueSchema:
    """An issue proposed by the planner."""

    title: str
    body: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "body": self.body}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IssueSchema:
        return cls(title=_string(data, "title"), body=_string(data, "body"))


@dataclass
class SplitResponseSchema:
    """One chunk of a corpus file."""

    id: uuid.UUID
    content: str
    order: int
    file_id: uuid.UUID

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "content": self.content,
            "order": self.order,
            "file_id": str(self.file_id),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SplitResponseSchema:
        return cls(
            id=_uuid(data, "id"),
            content=_string(data, "content"),
            order=_check_int(_require(data, "order"), "order"),
            file_id=_uuid(data, "file_id"),
        )


@dataclass
class SplitVectorSearchSchema:
    """A similarity search over the splits of a corpus."""

    corpus_id: uuid.UUID
    text: str
    limit: int | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        out = {"corpus_id": str(self.corpus_id), "text": self.text}
        return _put_optional(out, limit=self.limit)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SplitVectorSearchSchema:
        limit = data.get("limit") if isinstance(data, Mapping) else None
        return cls(
            corpus_id=_uuid(data, "corpus_id"),
            text=_string(data, "text"),
            limit=None if limit is None else _check_int(limit, "limit"),
        )