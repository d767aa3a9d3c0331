"""Entry point for running layerkit as a module."""

import sys

from layerkit.cli.app import main


if __name__ == "__main__":
    sys.exit(main())
