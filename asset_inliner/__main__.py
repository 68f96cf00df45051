"""Entry point: python -m asset_inliner"""

import sys

from asset_inliner.cli import main

if __name__ == "__main__":
    sys.exit(main())
