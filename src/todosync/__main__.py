"""Module entrypoint for ``python -m todosync``."""

from todosync.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
