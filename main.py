#!/usr/bin/env python3
# /kedit/main.py
"""
kedit launcher for source checkouts: `python main.py [FILENAME]`.

Installed copies use the `kedit` console script instead.
"""

import os
import sys

# Ensure the 'kedit' package is importable when running from the repository.
src_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from kedit.main import start  # noqa: E402


if __name__ == "__main__":
    start()
