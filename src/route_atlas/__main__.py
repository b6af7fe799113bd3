"""Entry point for running route-atlas as a module.

Usage:
    python -m route_atlas [command] [options]
"""

from route_atlas.cli import main

if __name__ == "__main__":
    main()
