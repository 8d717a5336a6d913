#!/usr/bin/env python3
"""
dockmon CLI Tool

Entry point for running the CLI from a source checkout.
"""

import sys

from dockmon_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
