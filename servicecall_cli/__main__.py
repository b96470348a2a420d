"""
Module execution entry point.

Allows running with: python -m servicecall_cli
"""

import sys
from servicecall_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
