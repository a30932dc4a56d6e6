# SPDX-License-Identifier: MIT
"""Allow running bscf as ``python -m bscf``."""

import sys

from bscf.cli import main

sys.exit(main())
