"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

from todosync.config import DEFAULT_CONFIG_NAME


def _package_version() -> str:
    try:
        return version("todosync")
    except PackageNotFoundError:
        return "0.0.0"


def _add_sync_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("files", nargs="+", metavar="FILE", help="Source files to synchronize")
    parser.add_argument("--config", default=f"./{DEFAULT_CONFIG_NAME}", help=f"Path to {DEFAULT_CONFIG_NAME}")
    parser.add_argument("--dry-run", action="store_true", help="Preview mode: no remote or local writes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todosync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    push_parser = subparsers.add_parser("push", help="Sync markers in FILE(s) to the remote store, as on save")
    _add_sync_arguments(push_parser)

    pull_parser = subparsers.add_parser("pull", help="Apply remote edits and archivals to FILE(s)")
    _add_sync_arguments(pull_parser)

    properties_parser = subparsers.add_parser("properties", help="List the remote database properties")
    properties_parser.add_argument(
        "--config", default=f"./{DEFAULT_CONFIG_NAME}", help=f"Path to {DEFAULT_CONFIG_NAME}"
    )
    properties_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    init_parser = subparsers.add_parser("init", help=f"Generate a {DEFAULT_CONFIG_NAME} config file")
    init_parser.add_argument(
        "--output",
        "-o",
        default=DEFAULT_CONFIG_NAME,
        help=f"Output file path (default: {DEFAULT_CONFIG_NAME})",
    )
    init_parser.add_argument("--database-id", default="", help="Notion database id")
    init_parser.add_argument(
        "--auth",
        choices=["env", "token"],
        default="env",
        help="Token source: NOTION_TOKEN environment variable (env) or a token in the config (token)",
    )
    init_parser.add_argument("--token", default=None, help="Token to store when --auth token")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing config file")

    return parser


__all__ = ["build_parser"]
