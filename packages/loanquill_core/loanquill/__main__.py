"""
Entry point for running LoanQuill as a module.

Usage:
    python -m loanquill render --values values.json -o letter.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
