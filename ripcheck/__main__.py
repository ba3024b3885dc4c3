"""Allow ``python -m ripcheck``."""

import sys

from ripcheck.cli import main

sys.exit(main())
