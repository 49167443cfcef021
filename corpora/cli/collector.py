"""Gathering the text files of a corpus and packing them into tarballs."""

from __future__ import annotations

import abc
import os
import re
import subprocess
import tarfile
from pathlib import Path
from typing import Iterable

from corpora.cli.config import CorporaConfig

TARBALL_NAME = "temp_tarball_selected.tar.gz"

_GLOB_LEXER = re.compile(
    r"(?P<prefix>(?:^|(?<=/))\*\*/)"
    r"|(?P<globstar>\*\*)"
    r"|(?P<star>\*)"
    r"|(?P<any>\?)"
    r"|(?P<cls>\[(?P<neg>[!^]?)(?P<body>\]?[^\]]*)\])"
    r"|(?P<open>\{)"
    r"|(?P<close>\})"
    r"|(?P<comma>,)"
    r"|(?P<lit>[^*?\[{},]+)"
    r"|(?P<bad>\[)"
)


class CollectorError(Exception):
    """A collector could not be set up or failed to gather files."""


def _compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob in which `*` and `**` both match across `/`."""
    parts: list[str] = []
    depth = 0
    for piece in _GLOB_LEXER.finditer(pattern):
        kind = piece.lastgroup
        if kind in ("neg", "body"):
            kind = "cls"
        if kind == "prefix":
            parts.append("(?:.*/)?")
        elif kind in ("globstar", "star"):
            parts.append(".*")
        elif kind == "any":
            parts.append(".")
        elif kind == "cls":
            negate = "^" if piece.group("neg") else ""
            body = piece.group("body").replace("\\", "\\\\")
            parts.append(f"[{negate}{body}]")
        elif kind == "open":
            if depth:
                raise CollectorError(f"Invalid glob pattern in config: {pattern!r}")
            depth += 1
            parts.append("(?:")
        elif kind == "close":
            if not depth:
                raise CollectorError(f"Invalid glob pattern in config: {pattern!r}")
            depth -= 1
            parts.append(")")
        elif kind == "comma":
            parts.append("|" if depth else ",")
        elif kind == "lit":
            parts.append(re.escape(piece.group()))
        else:
            raise CollectorError(f"Invalid glob pattern in config: {pattern!r}")
    if depth:
        raise CollectorError(f"Invalid glob pattern in config: {pattern!r}")
    try:
        return re.compile("".join(parts), re.DOTALL)
    except re.error as exc:
        raise CollectorError(f"Invalid glob pattern in config: {pattern!r}") from exc


def is_text_file(path: str | os.PathLike[str]) -> bool:
    """True if the file is empty or valid UTF-8; False if unreadable."""
    try:
        contents = Path(path).read_bytes()
    except OSError:
        return False
    try:
        contents.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


class Collector(abc.ABC):
    """Finds the files of a corpus and packs them for upload."""

    @abc.abstractmethod
    def collect_paths(self) -> list[Path]:
        """Return every path the collector considers part of the corpus."""

    @abc.abstractmethod
    def collect_tarball(self) -> Path:
        """Pack every collected file and return the tarball's path."""

    @abc.abstractmethod
    def collect_tarball_for_paths(self, paths: Iterable[str | os.PathLike[str]]) -> Path:
        """Pack only the given files and return the tarball's path."""


class GitCollector(Collector):
    """Collects the text files tracked by a Git repository."""

    def __init__(
        self,
        root_path: str | os.PathLike[str],
        exclude_globs: Iterable[str] | None = None,
    ) -> None:
        self.root_path = Path(root_path)
        self._excludes = [_compile_glob(pattern) for pattern in exclude_globs or ()]

    def _excluded(self, path: Path) -> bool:
        try:
            relative = path.relative_to(self.root_path)
        except ValueError:
            relative = path
        text = relative.as_posix()
        return any(regex.fullmatch(text) for regex in self._excludes)

    def collect_paths(self) -> list[Path]:
        print("Starting to collect paths")
        try:
            result = subprocess.run(
                ["git", "ls-files"],
                cwd=self.root_path,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise CollectorError(f"Failed to execute git command: {exc}") from exc
        if result.returncode != 0:
            raise CollectorError(f"Git command failed with status {result.returncode}")

        listed = result.stdout.decode("utf-8", errors="replace").splitlines()
        tracked = [
            path
            for path in (self.root_path / line for line in listed)
            if is_text_file(path) and not self._excluded(path)
        ]
        print(f"Filtered paths: {len(tracked)}")
        return tracked

    def collect_tarball(self) -> Path:
        print("Starting to collect tarball")
        files = self.collect_paths()
        print(f"Files to include in tarball: {len(files)}")
        return self.collect_tarball_for_paths(files)

    def collect_tarball_for_paths(self, paths: Iterable[str | os.PathLike[str]]) -> Path:
        tarball_path = self.root_path / TARBALL_NAME
        with tarfile.open(tarball_path, "w:gz") as tar:
            for file_path in map(Path, paths):
                if not file_path.is_file():
                    continue
                try:
                    arcname = file_path.relative_to(self.root_path)
                except ValueError as exc:
                    raise CollectorError(
                        f"{file_path} is not inside {self.root_path}"
                    ) from exc
                tar.add(file_path, arcname=arcname.as_posix(), recursive=False)
        return tarball_path


def is_git_repo(root_path: str | os.PathLike[str]) -> bool:
    """True if the path or one of its parents holds a `.git` entry."""
    root = Path(root_path).absolute()
    return any((directory / ".git").exists() for directory in (root, *root.parents))


def get_collector(config: CorporaConfig) -> Collector:
    """Choose the collector that suits the configured project."""
    if is_git_repo(config.root_path):
        return GitCollector(config.root_path, config.exclude_globs)
    raise CollectorError("No suitable file collector found for the given configuration.")