"""Allow ``python -m genpass``."""

import sys

from genpass.cli import main

sys.exit(main())
