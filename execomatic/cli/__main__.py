"""Allow ``python -m execomatic.cli``."""

from execomatic.cli import main

if __name__ == "__main__":
    main()
