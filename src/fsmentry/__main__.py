"""Allow running as ``python -m fsmentry``."""

from fsmentry.cli import main

if __name__ == "__main__":
    main()
