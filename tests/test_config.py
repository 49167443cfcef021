from pathlib import Path

from corpora.cli.config import CorporaConfig, ServerConfig, load_config

CONFIG_TEXT = """\
name: notes
server:
  base_url: http://localhost:8000
url: https://example.com/notes.git
exclude_globs:
  - "*.lock"
  - "drafts/**"
"""


def _write_config(root: Path, text: str = CONFIG_TEXT) -> None:
    (root / ".corpora.yaml").write_text(text, encoding="utf-8")


def test_loads_config_from_start_directory(tmp_path):
    _write_config(tmp_path)
    config = load_config(tmp_path)
    assert config == CorporaConfig(
        name="notes",
        server=ServerConfig(base_url="http://localhost:8000"),
        url="https://example.com/notes.git",
        exclude_globs=["*.lock", "drafts/**"],
        root_path=tmp_path,
        relative_path="",
        id=None,
    )


def test_finds_config_in_parent_directory(tmp_path):
    _write_config(tmp_path)
    nested = tmp_path / "chapters" / "one"
    nested.mkdir(parents=True)
    config = load_config(nested)
    assert config.root_path == tmp_path
    assert config.name == "notes"


def test_reads_trimmed_corpus_id(tmp_path):
    _write_config(tmp_path)
    (tmp_path / ".corpora").mkdir()
    (tmp_path / ".corpora" / ".id").write_text("  abc-123\n", encoding="utf-8")
    assert load_config(tmp_path).id == "abc-123"


def test_exclude_globs_are_optional(tmp_path):
    _write_config(
        tmp_path,
        "name: notes\nserver:\n  base_url: http://localhost\nurl: u\n",
    )
    config = load_config(tmp_path)
    assert config.exclude_globs is None
    assert config.server.base_url == "http://localhost"


def test_missing_required_field_gives_none(tmp_path):
    _write_config(tmp_path, "name: notes\nurl: u\n")
    assert load_config(tmp_path) is None


def test_wrong_field_type_gives_none(tmp_path):
    _write_config(
        tmp_path,
        "name: notes\nserver:\n  base_url: http://localhost\nurl: u\nexclude_globs: 5\n",
    )
    assert load_config(tmp_path) is None


def test_invalid_yaml_gives_none(tmp_path):
    _write_config(tmp_path, "name: [unclosed\n")
    assert load_config(tmp_path) is None


def test_no_config_anywhere_gives_none(tmp_path):
    assert load_config(tmp_path) is None