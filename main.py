#!/usr/bin/env python3
"""GLauncher entry point"""

import sys

from glauncher.cli import main

if __name__ == "__main__":
    # Fast startup
    sys.dont_write_bytecode = True
    sys.exit(main())
