"""
Main entry point for the delve CLI.

This module is executed when running `python -m delve` or via the `delve` executable.
"""

from .cli import app


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
