"""
Entry point for running tooldepot CLI as a module.

Usage: python -m tooldepot [command] [options]
"""

from tooldepot.cli.parser import main

if __name__ == "__main__":
    main()
