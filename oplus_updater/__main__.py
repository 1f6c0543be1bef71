# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors

"""Entry point for running the CLI as a module.

Usage:
    python -m oplus_updater --ota-version RMX3820_11.A
"""

import sys

from oplus_updater.cli import main

if __name__ == "__main__":
    sys.exit(main())
