"""Allow `python -m banking`."""

import sys

from banking.cli import main


if __name__ == "__main__":
    sys.exit(main())
