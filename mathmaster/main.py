from __future__ import annotations

"""Entry point for `python -m mathmaster.main`."""

import sys

from . import __version__
from .app.cli import main


def cli() -> None:
    argv = sys.argv[1:]
    if argv and argv[0] == "--version":
        print(f"mathmaster {__version__}")
        sys.exit(0)
    sys.exit(main(argv))


if __name__ == "__main__":
    cli()
