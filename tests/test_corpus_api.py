import uuid

import pytest
import responses
from responses import matchers

from corpora.client import corpus_api
from corpora.client.base import ApiError, Configuration, DecodeError, ResponseError
from corpora.client.models import CorpusChatSchema, MessageSchema

BASE = "http://api.example.com"
CORPUS_ID = "123e4567-e89b-12d3-a456-426614174000"


def _corpus_json(name="notes", **extra):
    data = {
        "id": CORPUS_ID,
        "name": name,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
    }
    data.update(extra)
    return data


@pytest.fixture
def config():
    return Configuration(base_path=BASE, bearer_access_token="token")


@pytest.fixture
def rsps():
    with responses.RequestsMock() as mock:
        yield mock


@pytest.fixture
def tarball(tmp_path):
    path = tmp_path / "corpus.tar.gz"
    path.write_bytes(b"tarball-bytes")
    return path


def test_chat_sends_schema_and_returns_reply(config, rsps):
    schema = CorpusChatSchema(
        corpus_id=CORPUS_ID,
        messages=[MessageSchema(role="user", text="hello")],
        voice="calm",
    )
    rsps.post(
        f"{BASE}/api/corpora/corpus/chat",
        json="a reply",
        match=[matchers.json_params_matcher(schema.to_dict())],
    )
    assert corpus_api.chat(config, schema) == "a reply"
    assert rsps.calls[0].request.headers["Authorization"] == "Bearer token"


def test_chat_error_status_raises_response_error(config, rsps):
    rsps.post(f"{BASE}/api/corpora/corpus/chat", json="not found", status=404)
    schema = CorpusChatSchema(corpus_id=CORPUS_ID, messages=[])
    with pytest.raises(ResponseError) as info:
        corpus_api.chat(config, schema)
    assert info.value.status == 404
    assert info.value.entity == "not found"


def test_chat_non_string_reply_is_decode_error(config, rsps):
    rsps.post(f"{BASE}/api/corpora/corpus/chat", json={"text": "x"})
    with pytest.raises(DecodeError):
        corpus_api.chat(config, CorpusChatSchema(corpus_id=CORPUS_ID, messages=[]))


def test_create_corpus_uploads_multipart(config, rsps, tarball):
    rsps.post(f"{BASE}/api/corpora/corpus", json=_corpus_json(url="https://example.com/r"))
    result = corpus_api.create_corpus(config, "notes", tarball, "https://example.com/r")
    assert result.id == uuid.UUID(CORPUS_ID)
    assert result.name == "notes"
    assert result.url == "https://example.com/r"
    body = rsps.calls[0].request.body
    assert b'name="name"' in body
    assert b'name="url"' in body
    assert b'name="tarball"' in body
    assert b'filename="corpus.tar.gz"' in body
    assert b"tarball-bytes" in body


def test_create_corpus_without_url_omits_field(config, rsps, tarball):
    rsps.post(f"{BASE}/api/corpora/corpus", json=_corpus_json())
    result = corpus_api.create_corpus(config, "notes", tarball)
    assert result.name == "notes"
    assert result.id == uuid.UUID(CORPUS_ID)
    body = rsps.calls[0].request.body
    assert b'name="url"' not in body
    assert b'name="name"' in body


def test_create_corpus_missing_tarball_raises(config, rsps, tmp_path):
    with pytest.raises(ApiError):
        corpus_api.create_corpus(config, "notes", tmp_path / "absent.tar.gz")
    assert len(rsps.calls) == 0


def test_create_corpus_conflict(config, rsps, tarball):
    rsps.post(f"{BASE}/api/corpora/corpus", json="exists", status=409)
    with pytest.raises(ResponseError) as info:
        corpus_api.create_corpus(config, "notes", tarball)
    assert info.value.status == 409


def test_delete_corpus_passes_name_as_query(config, rsps):
    rsps.delete(
        f"{BASE}/api/corpora/corpus",
        json="deleted",
        match=[matchers.query_param_matcher({"corpus_name": "notes"})],
    )
    assert corpus_api.delete_corpus(config, "notes") == "deleted"


def test_get_corpus(config, rsps):
    rsps.get(f"{BASE}/api/corpora/corpus/{CORPUS_ID}", json=_corpus_json())
    result = corpus_api.get_corpus(config, CORPUS_ID)
    assert result.to_dict() == _corpus_json()


def test_get_corpus_encodes_id(config, rsps):
    rsps.get(f"{BASE}/api/corpora/corpus/a+b%2Fc", json=_corpus_json())
    assert corpus_api.get_corpus(config, "a b/c").name == "notes"


def test_get_corpus_bad_body_is_decode_error(config, rsps):
    rsps.get(f"{BASE}/api/corpora/corpus/{CORPUS_ID}", json={"name": "notes"})
    with pytest.raises(DecodeError):
        corpus_api.get_corpus(config, CORPUS_ID)


def test_get_file_hashes(config, rsps):
    hashes = {"a.md": "abc", "dir/b.md": "def"}
    rsps.get(f"{BASE}/api/corpora/corpus/{CORPUS_ID}/files", json=hashes)
    assert corpus_api.get_file_hashes(config, CORPUS_ID) == hashes


def test_get_file_hashes_rejects_list(config, rsps):
    rsps.get(f"{BASE}/api/corpora/corpus/{CORPUS_ID}/files", json=["a.md"])
    with pytest.raises(DecodeError):
        corpus_api.get_file_hashes(config, CORPUS_ID)


def test_list_corpora(config, rsps):
    rsps.get(f"{BASE}/api/corpora/corpus", json=[_corpus_json("one"), _corpus_json("two")])
    result = corpus_api.list_corpora(config)
    assert [corpus.name for corpus in result] == ["one", "two"]


def test_update_files_joins_deletions(config, rsps, tarball):
    rsps.post(f"{BASE}/api/corpora/corpus/{CORPUS_ID}/files", json="ok")
    result = corpus_api.update_files(config, CORPUS_ID, tarball, ["a.md", "b/c.md"])
    assert result == "ok"
    body = rsps.calls[0].request.body
    assert b'name="delete_files"' in body
    assert b"a.md,b/c.md" in body
    assert b"tarball-bytes" in body


def test_update_files_without_deletions(config, rsps, tarball):
    rsps.post(f"{BASE}/api/corpora/corpus/{CORPUS_ID}/files", json="ok")
    assert corpus_api.update_files(config, CORPUS_ID, tarball) == "ok"
    assert b'name="delete_files"' not in rsps.calls[0].request.body


def test_update_files_server_error(config, rsps, tarball):
    rsps.post(f"{BASE}/api/corpora/corpus/{CORPUS_ID}/files", body="boom", status=500)
    with pytest.raises(ResponseError) as info:
        corpus_api.update_files(config, CORPUS_ID, tarball, [])
    assert info.value.content == "boom"
    assert info.value.entity is None