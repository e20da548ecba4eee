"""Command-line interfaces for pressfit."""

from pressfit.cli.main import main

# Define what's available when doing "from pressfit.cli import *"
__all__ = ["main"]
