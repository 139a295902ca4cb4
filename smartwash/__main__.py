"""
Entry point for ``python -m smartwash``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
