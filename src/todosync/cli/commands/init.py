"""Init command handler."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError


def run_init(args: argparse.Namespace) -> int:
    """Write a starter config file."""
    import todosync.cli as cli

    output = Path(args.output)
    if output.exists() and not args.force:
        print(f"error: {output} already exists (use --force or a different --output path)", file=sys.stderr)
        return 2

    try:
        config = cli.TodoSyncConfig(
            database_id=args.database_id.strip(),
            auth=args.auth,
            token=args.token if args.auth == "token" else None,
        )
    except ValidationError as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 3

    try:
        cli.write_config(config, output)
    except cli.ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3

    print(f"Config written to {output}")
    if not config.database_id:
        print("\nSet database_id to your Notion database id before syncing.")
    if config.auth == "env":
        print("Export NOTION_TOKEN with your integration token.")
    print("\nThen preview a sync with:")
    print(f"  todosync push --config {output} --dry-run FILE...")
    return 0


__all__ = ["run_init"]
