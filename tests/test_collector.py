import subprocess
import tarfile
from pathlib import Path
from unittest import mock

import pytest

from corpora.cli.collector import (
    TARBALL_NAME,
    Collector,
    CollectorError,
    GitCollector,
    get_collector,
    is_git_repo,
    is_text_file,
)
from corpora.cli.config import CorporaConfig, ServerConfig

LISTING = b"a.md\nnotes/b.md\nbin.dat\nempty.txt\nmissing.txt\nb.md\n"


@pytest.fixture
def repo(tmp_path):
    (tmp_path / "notes").mkdir()
    (tmp_path / "a.md").write_text("alpha", encoding="utf-8")
    (tmp_path / "b.md").write_text("beta", encoding="utf-8")
    (tmp_path / "notes" / "b.md").write_text("nested", encoding="utf-8")
    (tmp_path / "bin.dat").write_bytes(b"\xff\xfe\x00")
    (tmp_path / "empty.txt").write_bytes(b"")
    return tmp_path


def _git_ok(stdout=LISTING):
    return subprocess.CompletedProcess(["git", "ls-files"], 0, stdout=stdout, stderr=b"")


def _collect(root, globs):
    with mock.patch("subprocess.run", return_value=_git_ok()) as run:
        paths = GitCollector(root, globs).collect_paths()
    return paths, run


def test_collect_paths_keeps_tracked_text_files(repo):
    paths, run = _collect(repo, None)
    assert paths == [repo / "a.md", repo / "notes/b.md", repo / "empty.txt", repo / "b.md"]
    assert run.call_args.kwargs["cwd"] == repo


def test_star_matches_across_directories(repo):
    paths, _ = _collect(repo, ["*.md"])
    assert paths == [repo / "empty.txt"]


def test_directory_glob_excludes_only_that_directory(repo):
    paths, _ = _collect(repo, ["notes/*"])
    assert repo / "notes/b.md" not in paths
    assert repo / "b.md" in paths


def test_leading_globstar_matches_at_any_depth(repo):
    paths, _ = _collect(repo, ["**/b.md"])
    assert repo / "b.md" not in paths
    assert repo / "notes/b.md" not in paths
    assert repo / "a.md" in paths


def test_alternation_and_character_class(repo):
    paths, _ = _collect(repo, ["{a,b}.md", "empty.tx[!q]"])
    assert paths == [repo / "notes/b.md"]


@pytest.mark.parametrize("pattern", ["[abc", "{a,{b}}", "a}", "{a,b"])
def test_invalid_glob_is_rejected(tmp_path, pattern):
    with pytest.raises(CollectorError):
        GitCollector(tmp_path, [pattern])


def test_git_failure_raises(tmp_path):
    failed = subprocess.CompletedProcess(["git", "ls-files"], 128, stdout=b"", stderr=b"")
    with mock.patch("subprocess.run", return_value=failed):
        with pytest.raises(CollectorError, match="status 128"):
            GitCollector(tmp_path).collect_paths()


def test_missing_git_raises(tmp_path):
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("git")):
        with pytest.raises(CollectorError, match="Failed to execute git command"):
            GitCollector(tmp_path).collect_paths()


def test_tarball_for_paths_round_trip(repo):
    collector = GitCollector(repo)
    tarball = collector.collect_tarball_for_paths(
        [repo / "a.md", repo / "notes/b.md", repo / "notes", repo / "missing.txt"]
    )
    assert tarball == repo / TARBALL_NAME
    with tarfile.open(tarball, "r:gz") as tar:
        assert sorted(tar.getnames()) == ["a.md", "notes/b.md"]
        assert tar.extractfile("notes/b.md").read() == b"nested"


def test_tarball_rejects_paths_outside_root(repo, tmp_path_factory):
    outside = tmp_path_factory.mktemp("elsewhere") / "x.md"
    outside.write_text("x", encoding="utf-8")
    with pytest.raises(CollectorError):
        GitCollector(repo).collect_tarball_for_paths([outside])


def test_collect_tarball_packs_collected_files(repo):
    with mock.patch("subprocess.run", return_value=_git_ok()):
        tarball = GitCollector(repo, ["notes/**"]).collect_tarball()
    with tarfile.open(tarball, "r:gz") as tar:
        assert sorted(tar.getnames()) == ["a.md", "b.md", "empty.txt"]


def test_is_text_file(repo):
    assert is_text_file(repo / "a.md") is True
    assert is_text_file(repo / "empty.txt") is True
    assert is_text_file(repo / "bin.dat") is False
    assert is_text_file(repo / "missing.txt") is False


def test_is_git_repo_looks_at_parents(tmp_path):
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "sub" / "deeper"
    nested.mkdir(parents=True)
    assert is_git_repo(nested) is True


def _config(root: Path) -> CorporaConfig:
    return CorporaConfig(
        name="notes",
        server=ServerConfig(base_url="http://localhost"),
        url="https://example.com/notes.git",
        exclude_globs=["*.lock"],
        root_path=root,
    )


def test_get_collector_for_git_repository(tmp_path):
    (tmp_path / ".git").mkdir()
    collector = get_collector(_config(tmp_path))
    assert isinstance(collector, GitCollector)
    assert collector.root_path == tmp_path


def test_get_collector_without_repository_raises(tmp_path):
    with pytest.raises(CollectorError, match="No suitable file collector"):
        get_collector(_config(tmp_path))


def test_collector_is_abstract():
    with pytest.raises(TypeError):
        Collector()