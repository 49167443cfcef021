"""Calls that revise a single corpus file."""

from __future__ import annotations

from corpora.client.base import Configuration, DecodeError, request
from corpora.client.models import CorpusFileChatSchema


def file(
    configuration: Configuration, corpus_file_chat_schema: CorpusFileChatSchema
) -> str:
    """Ask for a revision of one file and return its new text."""
    body = request(
        configuration,
        "POST",
        "/api/corpora/workon/file",
        json_body=corpus_file_chat_schema.to_dict(),
    )
    if not isinstance(body, str):
        raise DecodeError(f"expected a string, got {body!r}")
    return body