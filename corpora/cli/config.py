"""Locating and reading the `.corpora.yaml` project configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILE_NAME = ".corpora.yaml"
ID_FILE = Path(".corpora") / ".id"


@dataclass
class ServerConfig:
    """Where the corpora server lives."""

    base_url: str


@dataclass
class CorporaConfig:
    """Project settings, plus the facts derived from where they were found."""

    name: str
    server: ServerConfig
    url: str
    exclude_globs: list[str] | None = None
    root_path: Path = field(default_factory=Path)
    relative_path: str = ""
    id: str | None = None


def _parse(document: Any) -> CorporaConfig | None:
    if not isinstance(document, dict):
        return None
    name = document.get("name")
    server = document.get("server")
    url = document.get("url")
    if not isinstance(name, str) or not isinstance(url, str):
        return None
    if not isinstance(server, dict) or not isinstance(server.get("base_url"), str):
        return None
    exclude_globs = document.get("exclude_globs")
    if exclude_globs is not None and not (
        isinstance(exclude_globs, list)
        and all(isinstance(pattern, str) for pattern in exclude_globs)
    ):
        return None
    return CorporaConfig(
        name=name,
        server=ServerConfig(base_url=server["base_url"]),
        url=url,
        exclude_globs=None if exclude_globs is None else list(exclude_globs),
    )


def _read_id(directory: Path) -> str | None:
    id_path = directory / ID_FILE
    if not id_path.exists():
        return None
    try:
        return id_path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None


def _read(config_path: Path, directory: Path) -> CorporaConfig | None:
    try:
        document = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        return None
    config = _parse(document)
    if config is None:
        return None
    config.root_path = directory
    config.relative_path = ""
    config.id = _read_id(directory)
    return config


def load_config(start: str | os.PathLike[str] | None = None) -> CorporaConfig | None:
    """Find `.corpora.yaml` in `start` or the nearest parent and load it.

    Returns None when no configuration is found or it cannot be read.
    """
    here = Path.cwd() if start is None else Path(start).absolute()
    for directory in (here, *here.parents):
        config_path = directory / CONFIG_FILE_NAME
        if config_path.exists():
            return _read(config_path, directory)
    return None