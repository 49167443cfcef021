"""Calls on the corpus resource: creation, lookup, chat and file sync."""

from __future__ import annotations

import os
from typing import Any, Iterable

from corpora.client.base import Configuration, DecodeError, request, urlencode
from corpora.client.models import CorpusChatSchema, CorpusResponseSchema

_CORPUS_PATH = "/api/corpora/corpus"


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"expected a string, got {value!r}")
    return value


def _as_corpus(value: Any) -> CorpusResponseSchema:
    try:
        return CorpusResponseSchema.from_dict(value)
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc


def _corpus_path(corpus_id: str, suffix: str = "") -> str:
    return f"{_CORPUS_PATH}/{urlencode(corpus_id)}{suffix}"


def chat(configuration: Configuration, corpus_chat_schema: CorpusChatSchema) -> str:
    """Chat with the corpus and return the assistant's reply."""
    body = request(
        configuration,
        "POST",
        f"{_CORPUS_PATH}/chat",
        json_body=corpus_chat_schema.to_dict(),
    )
    return _as_str(body)


def create_corpus(
    configuration: Configuration,
    name: str,
    tarball: str | os.PathLike[str],
    url: str | None = None,
) -> CorpusResponseSchema:
    """Create a new corpus from an uploaded tarball."""
    form = {"name": name}
    if url is not None:
        form["url"] = url
    body = request(
        configuration,
        "POST",
        _CORPUS_PATH,
        form=form,
        files={"tarball": tarball},
    )
    return _as_corpus(body)


def delete_corpus(configuration: Configuration, corpus_name: str) -> str:
    """Delete a corpus by name."""
    body = request(
        configuration,
        "DELETE",
        _CORPUS_PATH,
        params={"corpus_name": corpus_name},
    )
    return _as_str(body)


def get_corpus(configuration: Configuration, corpus_id: str) -> CorpusResponseSchema:
    """Retrieve a corpus by its ID."""
    return _as_corpus(request(configuration, "GET", _corpus_path(corpus_id)))


def get_file_hashes(configuration: Configuration, corpus_id: str) -> dict[str, str]:
    """Return a map of file paths to their hashes for a corpus."""
    body = request(configuration, "GET", _corpus_path(corpus_id, "/files"))
    if not isinstance(body, dict):
        raise DecodeError(f"expected an object, got {body!r}")
    return {_as_str(path): _as_str(digest) for path, digest in body.items()}


def list_corpora(configuration: Configuration) -> list[CorpusResponseSchema]:
    """List all corpora."""
    body = request(configuration, "GET", _CORPUS_PATH)
    if not isinstance(body, list):
        raise DecodeError(f"expected a list, got {body!r}")
    return [_as_corpus(item) for item in body]


def update_files(
    configuration: Configuration,
    corpus_id: str,
    tarball: str | os.PathLike[str],
    delete_files: Iterable[str] | None = None,
) -> str:
    """Upload added or changed files and name the files to delete."""
    form = {}
    if delete_files is not None:
        form["delete_files"] = ",".join(str(path) for path in delete_files)
    body = request(
        configuration,
        "POST",
        _corpus_path(corpus_id, "/files"),
        form=form,
        files={"tarball": tarball},
    )
    return _as_str(body)