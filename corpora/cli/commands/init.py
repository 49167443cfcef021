"""The `init` command: upload a new corpus to the server."""

from __future__ import annotations

import os
import tarfile
import uuid
from pathlib import Path

from corpora.cli.collector import CollectorError
from corpora.cli.context import Context
from corpora.client import corpus_api
from corpora.client.base import ApiError

_COLLECT_ERRORS = (CollectorError, OSError, tarfile.TarError)


def write_corpus_id(root_path: str | os.PathLike[str], corpus_id: uuid.UUID | str) -> Path:
    """Write the corpus ID to `.corpora/.id` under the root and return that path."""
    corpora_dir = Path(root_path) / ".corpora"
    corpora_dir.mkdir(parents=True, exist_ok=True)
    id_path = corpora_dir / ".id"
    id_path.write_text(f"{corpus_id}\n", encoding="utf-8")
    return id_path


def _remove_tarball(ctx: Context, tarball_path: Path) -> None:
    ctx.print("Cleaning up temporary files...", "cyan")
    try:
        tarball_path.unlink()
    except OSError as exc:
        ctx.warn(f"Failed to remove temporary tarball: {exc}")
    else:
        ctx.success("Temporary tarball file removed successfully.")


def run(ctx: Context) -> None:
    """Pack the corpus, create it on the server and remember its ID."""
    ctx.success("Starting corpus initialization...")

    corpus_name = ctx.corpora_config.name
    ctx.print(f"Using corpus name: {corpus_name}", "blue")
    url = ctx.corpora_config.url
    ctx.print(f"Using repository URL: {url}", "blue")

    ctx.print("Collecting files for tarball...", "cyan")
    tarball_progress = ctx.progress_bar(100, "Creating tarball...")
    try:
        tarball_path = Path(ctx.collector.collect_tarball())
    except _COLLECT_ERRORS as exc:
        tarball_progress.abandon_with_message("Failed to create tarball.")
        ctx.error(f"Failed to create tarball: {exc}")
        return
    tarball_progress.finish_with_message("Tarball created successfully!")
    ctx.success(f"Tarball generated at: {tarball_path}")

    size_mb = tarball_path.stat().st_size / (1024.0 * 1024.0)
    ctx.print(f"Tarball size: {size_mb:.8f} MB", "blue")

    if not ctx.prompt_confirm("Do you want to proceed with creating a new corpus?"):
        ctx.warn("Initialization aborted by the user.")
        _remove_tarball(ctx, tarball_path)
        return

    ctx.print("Sending tarball to server...", "cyan")
    api_progress = ctx.progress_bar(1, "Creating corpus...")
    try:
        response = corpus_api.create_corpus(ctx.api_config, corpus_name, tarball_path, url)
    except ApiError as exc:
        api_progress.abandon_with_message("Failed to create corpus.")
        ctx.error(f"Failed to create corpus: {exc}")
    else:
        api_progress.finish_with_message("Corpus created successfully!")
        ctx.success(f"Corpus created successfully with ID: {response.id}")
        try:
            write_corpus_id(ctx.corpora_config.root_path, response.id)
        except OSError as exc:
            ctx.error(f"Failed to write corpus ID: {exc}")
        else:
            ctx.success("Corpus ID saved to `.corpora/.id`.")

    _remove_tarball(ctx, tarball_path)