#!/usr/bin/env python3
"""
Entry point for running robin_chunking as a module.

This allows the package to be run with:
    python -m robin_chunking
"""

from robin_chunking.cli import main

if __name__ == "__main__":
    main()
