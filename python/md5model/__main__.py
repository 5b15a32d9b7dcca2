"""
Entry point for running the package as a module.

Usage:
    python -m md5model model.md5mesh walk.md5anim
"""

from .main import main

if __name__ == '__main__':
    main()
