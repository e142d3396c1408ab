"""Allow ``python -m config_normalizer``."""

import sys

from config_normalizer.cli import main

sys.exit(main())
