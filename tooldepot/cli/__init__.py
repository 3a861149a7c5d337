"""
tooldepot CLI module.

This module provides the command-line interface for tooldepot.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
