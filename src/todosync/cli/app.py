"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from todosync import AuthenticationError, ConfigError, ProviderError, SyncError


def main(argv: list[str] | None = None) -> int:
    import todosync.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        return cli._run_init(args)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    try:
        if args.command == "push":
            results = cli.asyncio.run(cli._run_push(args))
            if any(result.aborted for result in results):
                return 3
            return 5 if any(result.failures for result in results) else 0
        if args.command == "pull":
            result = cli.asyncio.run(cli._run_pull(args))
            if result.aborted:
                return 3
            return 5 if result.failures else 0
        if args.command == "properties":
            cli.asyncio.run(cli._run_properties(args))
        return 0
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except (AuthenticationError, ProviderError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except SyncError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except Exception as exc:  # pragma: no cover - unexpected failure
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
