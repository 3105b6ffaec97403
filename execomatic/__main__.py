"""Allow ``python -m execomatic``."""

from execomatic.cli import main

if __name__ == "__main__":
    main()
