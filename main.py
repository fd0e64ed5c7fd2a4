"""Run the rebootBot CLI from a source checkout."""
import sys

from rebootBot.cli import main


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
