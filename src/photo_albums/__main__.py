"""Entry point for python -m photo_albums."""

import sys

from photo_albums.cli import main

sys.exit(main())
