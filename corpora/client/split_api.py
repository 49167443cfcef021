"""Calls on the splits (chunks) of corpus files."""

from __future__ import annotations

from typing import Any

from corpora.client.base import Configuration, DecodeError, request, urlencode
from corpora.client.models import SplitResponseSchema, SplitVectorSearchSchema

_SPLIT_PATH = "/api/corpora/split"


def _as_split(value: Any) -> SplitResponseSchema:
    try:
        return SplitResponseSchema.from_dict(value)
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc


def _as_split_list(value: Any) -> list[SplitResponseSchema]:
    if not isinstance(value, list):
        raise DecodeError(f"expected a list, got {value!r}")
    return [_as_split(item) for item in value]


def get_split(configuration: Configuration, split_id: str) -> SplitResponseSchema:
    """Retrieve a split by its ID."""
    body = request(configuration, "GET", f"{_SPLIT_PATH}/{urlencode(split_id)}")
    return _as_split(body)


def list_splits_for_file(
    configuration: Configuration, file_id: str
) -> list[SplitResponseSchema]:
    """List all splits of one corpus file."""
    body = request(configuration, "GET", f"{_SPLIT_PATH}/file/{urlencode(file_id)}")
    return _as_split_list(body)


def vector_search(
    configuration: Configuration,
    split_vector_search_schema: SplitVectorSearchSchema,
) -> list[SplitResponseSchema]:
    """Find the splits most similar to the given text."""
    body = request(
        configuration,
        "POST",
        f"{_SPLIT_PATH}/search",
        json_body=split_vector_search_schema.to_dict(),
    )
    return _as_split_list(body)