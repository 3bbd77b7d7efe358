"""Entry point for running the formatter as a module.

Usage:
    python -m vbsfmt format script.vbs
"""

from vbsfmt.cli import main

if __name__ == "__main__":
    main()
