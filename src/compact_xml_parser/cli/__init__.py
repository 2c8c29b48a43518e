"""Command-line interface for Compact XML Parser.

Provides the ``compact-xml`` tool for parsing reports, debug tree dumps and
validation of XML files.
"""

from .main import main

__all__ = ["main"]
