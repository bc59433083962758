"""
Entry point for running program_docs as a module.

Usage: python -m program_docs [args]
"""

import sys

from program_docs.cli import main

if __name__ == "__main__":
    sys.exit(main())
