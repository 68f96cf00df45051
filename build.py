#!/usr/bin/env python3
"""
Page build script for the fan curve editor

Reads index.html and the mojs bundles from node_modules/ and produces:
- dist/index.html + dist/index.html.gz  (bundles inlined, default)
- docs/index.html                       (bundles from jsDelivr, --docs)

The dist build also refreshes esp32/src/assets/index.html.gz, which the
firmware serves with Content-Encoding: gzip.

Usage:
    python build.py            # dist build
    python build.py --docs     # GitHub Pages build
    python build.py --check    # fail if dist/ is out of date
"""

import sys

from asset_inliner.cli import main

if __name__ == "__main__":
    sys.exit(main())
