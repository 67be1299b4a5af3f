"""Allow ``python -m awschecker``."""

from awschecker.cli import main

if __name__ == "__main__":
    main()
