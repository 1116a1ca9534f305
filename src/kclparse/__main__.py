"""Allow ``python -m kclparse``."""

import sys

from kclparse.cli import main

sys.exit(main())
