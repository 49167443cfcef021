"""The `sync` command: push local changes of a corpus to the server."""

from __future__ import annotations

import hashlib
import os
import tarfile
from pathlib import Path
from typing import Iterable, Mapping

from corpora.cli.collector import CollectorError
from corpora.cli.context import Context
from corpora.client import corpus_api
from corpora.client.base import ApiError

_COLLECT_ERRORS = (CollectorError, OSError, tarfile.TarError)


def cleanup_temp_files(files: Iterable[str | os.PathLike[str]], ctx: Context) -> None:
    """Remove temporary files, reporting each outcome."""
    for file in files:
        path = Path(file)
        ctx.success(f"Cleaning up temporary file: {path}")
        try:
            path.unlink()
        except OSError as exc:
            ctx.warn(f"Failed to remove temporary file: {exc}")
        else:
            ctx.success("Temporary file removed successfully.")


def git_blob_hash(path: str | os.PathLike[str]) -> str | None:
    """Return the Git blob hash of a file, or None if it cannot be read."""
    try:
        content = Path(path).read_bytes()
    except OSError:
        return None
    digest = hashlib.sha1(f"blob {len(content)}\0".encode("ascii"), usedforsecurity=False)
    digest.update(content)
    return digest.hexdigest()


def diff_hashes(
    local: Mapping[str, str], remote: Mapping[str, str]
) -> tuple[dict[str, str], list[str]]:
    """Split into files to add or update and files to delete on the server."""
    to_update = {path: digest for path, digest in local.items() if remote.get(path) != digest}
    to_delete = [path for path in remote if path not in local]
    return to_update, to_delete


def _local_hashes(root: Path, paths: Iterable[Path]) -> dict[str, str]:
    hashes: dict[str, str] = {}
    for path in paths:
        digest = git_blob_hash(path)
        if digest is not None:
            hashes[Path(path).relative_to(root).as_posix()] = digest
    return hashes


def run(ctx: Context) -> None:
    """Compare local files with the server and upload the differences."""
    ctx.success("Starting corpus sync...")

    corpus_id = ctx.corpora_config.id
    if corpus_id is None:
        ctx.error("Corpus ID not found in the configuration. Please run 'init' first.")
        return
    ctx.success(f"Corpus ID: {corpus_id}")

    ctx.success("Collecting local files...")
    try:
        local_files = ctx.collector.collect_paths()
    except _COLLECT_ERRORS as exc:
        ctx.error(f"Failed to collect local files: {exc}")
        return

    root = Path(ctx.corpora_config.root_path)
    local_hashes = _local_hashes(root, local_files)

    ctx.success("Fetching remote file hashes...")
    try:
        remote_hashes = corpus_api.get_file_hashes(ctx.api_config, corpus_id)
    except ApiError as exc:
        ctx.error(f"Failed to fetch remote file hashes: {exc}")
        return

    to_update, to_delete = diff_hashes(local_hashes, remote_hashes)

    ctx.warn(f"Files to update/add ({len(to_update)}):")
    for path in to_update:
        ctx.dim(f" - {path}")
    ctx.warn(f"Files to delete ({len(to_delete)}):")
    for path in to_delete:
        ctx.dim(f" - {path}")
    if not to_update and not to_delete:
        ctx.success("No changes detected. Everything is up-to-date!")
        return

    ctx.success("Creating tarball for updated/added files...")
    try:
        tarball_path = Path(
            ctx.collector.collect_tarball_for_paths([root / path for path in to_update])
        )
    except _COLLECT_ERRORS as exc:
        ctx.error(f"Failed to create tarball: {exc}")
        return
    ctx.success("Tarball created successfully!")

    if not ctx.prompt_confirm("Do you want to upload?"):
        cleanup_temp_files([tarball_path], ctx)
        ctx.warn("Aborting sync. No changes have been made.")
        return

    try:
        corpus_api.update_files(ctx.api_config, corpus_id, tarball_path, to_delete)
    except ApiError as exc:
        ctx.error(f"Failed to sync corpus: {exc}")
    else:
        ctx.success("Corpus sync completed successfully!")

    cleanup_temp_files([tarball_path], ctx)