"""``python -m taskcard_app``: run the CLI, rendering ./config.json when no subcommand is given."""

from __future__ import annotations

import sys

try:
    from .cli import main as _cli_main
except ImportError:
    # Executed as a plain script, without the package context.
    from taskcard_app.cli import main as _cli_main

DEFAULT_COMMAND = ["render"]


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    return int(_cli_main(args or list(DEFAULT_COMMAND)))


if __name__ == "__main__":
    raise SystemExit(main())
