"""Calls on the planner, which proposes issues for a corpus."""

from __future__ import annotations

from corpora.client.base import Configuration, DecodeError, request
from corpora.client.models import CorpusChatSchema, IssueSchema


def get_issue(
    configuration: Configuration, corpus_chat_schema: CorpusChatSchema
) -> IssueSchema:
    """Ask the planner for an issue drawn from the conversation."""
    body = request(
        configuration,
        "POST",
        "/api/corpora/plan/issue",
        json_body=corpus_chat_schema.to_dict(),
    )
    try:
        return IssueSchema.from_dict(body)
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc