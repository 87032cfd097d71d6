"""CLI package for the Playlist Converter client

This package provides the interactive command-line interface that logs in
through the backend and submits playlist conversions.
"""

from cli.cli_app import ConverterCLI
from cli.main import main

__all__ = [
    "ConverterCLI",
    "main",
]
