"""CloudSaver: entry point."""

import sys

from cloudsaver.cli import main

if __name__ == "__main__":
    sys.exit(main())
