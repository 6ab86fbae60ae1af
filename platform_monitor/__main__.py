"""Allow ``python -m platform_monitor``."""

import sys

from platform_monitor.main import main

sys.exit(main())
