"""Calls on the file resource of a corpus."""

from __future__ import annotations

from typing import Any

from corpora.client.base import Configuration, DecodeError, request, urlencode
from corpora.client.models import FileResponseSchema, FileSchema

_FILE_PATH = "/api/corpora/file"


def _as_file(value: Any) -> FileResponseSchema:
    try:
        return FileResponseSchema.from_dict(value)
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc


def create_file(
    configuration: Configuration, file_schema: FileSchema
) -> FileResponseSchema:
    """Create a new file within a corpus."""
    body = request(configuration, "POST", _FILE_PATH, json_body=file_schema.to_dict())
    return _as_file(body)


def get_file(configuration: Configuration, file_id: str) -> FileResponseSchema:
    """Retrieve a file by its ID."""
    body = request(configuration, "GET", f"{_FILE_PATH}/{urlencode(file_id)}")
    return _as_file(body)


def get_file_by_path(
    configuration: Configuration, corpus_id: str, path: str
) -> FileResponseSchema:
    """Retrieve a file by its path within a corpus."""
    body = request(
        configuration,
        "GET",
        f"{_FILE_PATH}/corpus/{urlencode(corpus_id)}",
        params={"path": path},
    )
    return _as_file(body)