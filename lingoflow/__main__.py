"""Module entrypoint for running LingoFlow as ``python -m lingoflow``."""

from __future__ import annotations

from lingoflow.cli import main


if __name__ == "__main__":
    main()
