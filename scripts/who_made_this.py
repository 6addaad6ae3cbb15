#!/usr/bin/env python3
"""CLI shim for the image attribution pipeline.

Usage examples:
  python scripts/who_made_this.py --image-url https://pbs.twimg.com/media/abc.jpg \
      --page-url https://x.com/alice/status/123
  python scripts/who_made_this.py --image-url https://example.com/a.png --page-html saved_page.html
  python scripts/who_made_this.py --save-saucenao-key YOUR_KEY
"""
from __future__ import annotations

import sys

from wmt_scraper.cli import main

if __name__ == "__main__":
    sys.exit(main())
