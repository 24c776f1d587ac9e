#!/usr/bin/env python3
"""
Arcana CLI.

Repository entry script; the installed console script is `arcana`.

Usage:
    python cli.py --help
    python cli.py config set api_key <YOUR_KEY>
    python cli.py code generate "<prompt>"
    python cli.py                   # interactive session
"""

from arcana.cli.main import run

if __name__ == "__main__":
    run()
