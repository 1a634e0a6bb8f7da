"""
cs2brief CLI Entry Point

Allows running the package as a module: python -m cs2brief
"""

from cs2brief.cli import main

if __name__ == "__main__":
    main()
