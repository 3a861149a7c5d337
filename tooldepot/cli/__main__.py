"""
Entry point for running tooldepot CLI as a module.

Usage: python -m tooldepot.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
