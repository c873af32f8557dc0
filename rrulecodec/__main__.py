"""Entry point for `python -m rrulecodec` command."""

import sys

from rrulecodec.cli import main as cli_main


def main() -> None:
    """Run the command line interface and exit with its status."""
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
