"""
Entry point for module execution (``python -m lombocator``).

This module delegates execution to the CLI handler in ``lombocator.cli.__main__``.
"""

import sys
from lombocator.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
