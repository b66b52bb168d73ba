"""Push command handler and formatting."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from todosync.cli.common import format_comma_or_none, format_failures, open_buffers
from todosync.cli.notify import RichNotifier
from todosync.cli.progress.rich import RichSyncProgress
from todosync.contracts.sync import PushResult


def format_push_summary(results: Sequence[PushResult]) -> str:
    dry_run = any(result.dry_run for result in results)
    mode = "dry-run" if dry_run else "apply"
    lines = ["", f"todosync - push complete ({mode})", ""]

    for result in results:
        lines.append(f"  {result.buffer_key}")
        if result.skipped:
            lines.append("    Skipped:   programmatic save")
            continue
        if result.aborted:
            lines.append(f"    Aborted:   {result.aborted}")
            continue
        if not result.remote_available:
            lines.append("    Remote:    unavailable, nothing pushed")
        lines.append(
            f"    Created:   {len(result.created)}  Updated: {len(result.updated)}  "
            f"Archived: {len(result.deleted)}  Unchanged: {result.unchanged}"
        )
        if result.stamped:
            lines.append(f"    Stamped:   {format_comma_or_none(result.stamped)}")
        if result.unstamped:
            lines.append(f"    Unstamped: {format_comma_or_none(result.unstamped)}")
        if result.failures:
            lines.append(f"    Failures:  {len(result.failures)}")
            lines.extend(format_failures(result.failures))

    if dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")
    lines.append("")
    return "\n".join(lines)


async def run_push(args: argparse.Namespace) -> list[PushResult]:
    import todosync.cli as cli

    config = cli.load_config(args.config)
    buffers = open_buffers(args.files)

    if not args.verbose:
        with RichSyncProgress() as progress:
            sdk = await cli.TodoSync.from_config(config, notifier=RichNotifier(), progress=progress)
            results = await sdk.push(buffers, dry_run=args.dry_run)
    else:
        sdk = await cli.TodoSync.from_config(config)
        results = await sdk.push(buffers, dry_run=args.dry_run)

    print(format_push_summary(results))
    return results


__all__ = ["format_push_summary", "run_push"]
