"""CLI entrypoint for phish_content_analyzer."""

from __future__ import annotations

import sys

from phish_content_analyzer.cli import main

if __name__ == "__main__":
    sys.exit(main())
