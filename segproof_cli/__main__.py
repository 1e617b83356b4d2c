"""
Module execution entry point.

Allows running with: python -m segproof_cli
"""

import sys
from segproof_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
