"""Allow running the scouter with ``python -m turtlesubmitter``."""

import sys

from .cli import main

sys.exit(main())
