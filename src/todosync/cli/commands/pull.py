"""Pull command handler and formatting."""

from __future__ import annotations

import argparse

from todosync.cli.common import format_comma_or_none, format_failures, open_buffers
from todosync.cli.notify import RichNotifier
from todosync.cli.progress.rich import RichSyncProgress
from todosync.contracts.sync import PullResult


def format_pull_summary(result: PullResult) -> str:
    mode = "dry-run" if result.dry_run else "apply"
    lines = ["", f"todosync - pull complete ({mode})", ""]

    if result.aborted:
        lines.append(f"  Aborted:   {result.aborted}")
    elif not result.remote_available:
        lines.append("  Remote:    unavailable, nothing pulled")
    else:
        lines.append(f"  Files:     {result.buffers_scanned}")
        lines.append(f"  Updated:   {format_comma_or_none(result.updated)}")
        lines.append(f"  Deleted:   {format_comma_or_none(result.deleted)}")
        if result.failures:
            lines.append(f"  Failures:  {len(result.failures)}")
            lines.extend(format_failures(result.failures))

    if result.dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")
    lines.append("")
    return "\n".join(lines)


async def run_pull(args: argparse.Namespace) -> PullResult:
    import todosync.cli as cli

    config = cli.load_config(args.config)
    buffers = open_buffers(args.files)

    if not args.verbose:
        with RichSyncProgress() as progress:
            sdk = await cli.TodoSync.from_config(config, notifier=RichNotifier(), progress=progress)
            result = await sdk.pull(buffers, dry_run=args.dry_run)
    else:
        sdk = await cli.TodoSync.from_config(config)
        result = await sdk.pull(buffers, dry_run=args.dry_run)

    print(format_pull_summary(result))
    return result


__all__ = ["format_pull_summary", "run_pull"]
