"""Entry point for python -m photo_tagger."""

import sys

from photo_tagger.viewer.app import main

sys.exit(main())
