"""
Main entry point for the media_api package.

Allows running the client as: python -m media_api
"""

import sys

from media_api.cli import main

if __name__ == "__main__":
    sys.exit(main())
