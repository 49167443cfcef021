"""The `issue` commands."""

from __future__ import annotations

from corpora.cli.context import Context


def create(ctx: Context) -> None:
    """Create a new issue."""
    print("Creating issue")
    print(f"Server URL: {ctx.api_config.base_path}")


def update(ctx: Context, issue_id: int) -> None:
    """Update an existing issue by ID."""
    print(f"Updating issue with ID: {issue_id}")
    print(f"Server URL: {ctx.api_config.base_path}")


def label(ctx: Context, issue_id: int) -> None:
    """Label an existing issue by ID."""
    print(f"Labeling issue with ID: {issue_id}")
    print(f"Server URL: {ctx.api_config.base_path}")