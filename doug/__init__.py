"""
Doug: a time tracking command-line utility.

Periods of work are stored per project in a local JSON file.
"""

__version__ = "0.1.0"
