"""
Main entry point for running the package as a module.

Usage:
    python -m bannerset process --bucket banners --key abc-halfPage-bannerset
    python -m bannerset compose --local-root ./store --bucket banners --prefix abc -o out.png
    python -m bannerset sizes
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
