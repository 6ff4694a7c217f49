"""
Package entry point.

Allows running the application via:

    python -m confswipe

This simply forwards execution to confswipe.cli.main().
"""

from confswipe.cli import main

if __name__ == "__main__":
    main()
