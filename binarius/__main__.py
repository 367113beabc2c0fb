"""
Entry point for running Binarius as a module.

Usage: python -m binarius [command] [options]
"""

from binarius.cli.parser import main

if __name__ == "__main__":
    main()
