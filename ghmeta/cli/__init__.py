"""Command-line interface for ghmeta.

This module provides the CLI functionality for pipeline metadata aggregation.
"""

from .main import main

__all__ = ["main"]
