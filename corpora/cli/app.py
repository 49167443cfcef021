"""Command-line definition and dispatch to the commands."""

from __future__ import annotations

import argparse

from corpora.cli.commands import chat, init, issue, sync, workon
from corpora.cli.context import Context

VERSION = "0.1.0"
_MAX_ISSUE_ID = 2**32 - 1


def _issue_id(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid issue ID: {text!r}") from None
    if not 0 <= value <= _MAX_ISSUE_ID:
        raise argparse.ArgumentTypeError(f"issue ID out of range: {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="corpora", description="Manage and process your corpora"
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"Corpora CLI {VERSION}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser(
        "init",
        help="Initial setup and uploads to the server",
        description="Initial setup and uploads to the server",
    )

    chat_parser = commands.add_parser(
        "chat", help="Chat the corpus", description="Chat the corpus"
    )
    chat_parser.add_argument("-p", "--persist", help="name of persistent session")
    chat_parser.add_argument(
        "-l",
        "--list",
        dest="list_sessions",
        action="store_true",
        help="list available sessions",
    )

    commands.add_parser(
        "sync",
        help="Find the diff and sync changes to the server",
        description="Find the diff and sync changes to the server",
    )

    workon_parser = commands.add_parser(
        "workon", help="Work on a specific file", description="Work on a specific file"
    )
    workon_parser.add_argument("path", help="Path to the file or directory")
    workon_parser.add_argument("-p", "--persist", help="name of persistent session")

    issue_parser = commands.add_parser(
        "issue", help="Manage issues", description="Manage issues"
    )
    issue_commands = issue_parser.add_subparsers(dest="issue_command", required=True)
    issue_commands.add_parser("create", help="Create a new issue")
    update_parser = issue_commands.add_parser(
        "update", help="Update an existing issue by ID"
    )
    update_parser.add_argument(
        "issue_id", type=_issue_id, help="ID of the issue to update"
    )
    label_parser = issue_commands.add_parser(
        "label", help="Label an existing issue by ID"
    )
    label_parser.add_argument(
        "issue_id", type=_issue_id, help="ID of the issue to label"
    )
    return parser


def dispatch(ctx: Context, args: argparse.Namespace) -> None:
    """Run the command that the parsed arguments select."""
    match args.command:
        case "init":
            init.run(ctx)
        case "sync":
            sync.run(ctx)
        case "chat":
            chat.run(ctx, args.persist, args.list_sessions)
        case "workon":
            workon.run(ctx, args.path, args.persist)
        case "issue":
            match args.issue_command:
                case "create":
                    issue.create(ctx)
                case "update":
                    issue.update(ctx, args.issue_id)
                case "label":
                    issue.label(ctx, args.issue_id)
                case other:
                    raise ValueError(f"unknown issue command: {other!r}")
        case other:
            raise ValueError(f"unknown command: {other!r}")