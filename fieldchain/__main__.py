"""CLI entry point for fieldchain.

Enables invocation via `python -m fieldchain`.
"""

import sys

from fieldchain.cli.app import app


def main() -> None:
    exit_code = app()
    sys.exit(exit_code if exit_code is not None else 0)


if __name__ == "__main__":
    main()
