"""
Entry point for running Binarius CLI as a module.

Usage: python -m binarius.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
