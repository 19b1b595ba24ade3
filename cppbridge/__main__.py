"""Allow ``python -m cppbridge``."""

import sys

from cppbridge.cli import main

sys.exit(main())
