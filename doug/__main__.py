"""
Main entry point for Doug when run as a module.

Allows running with: python -m doug
"""

from doug.cli.main import app

if __name__ == "__main__":
    app()
