"""Allow ``python -m vmbuild``."""

import sys

from vmbuild.cli import main

if __name__ == "__main__":
    sys.exit(main())
