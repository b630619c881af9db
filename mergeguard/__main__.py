"""
Entry point for running mergeguard as a module.

Usage:
    python -m mergeguard --help
    python -m mergeguard scan --text "Hi *|FNAME|*"
    python -m mergeguard catalog --input template.json
"""
from .cli import app


if __name__ == "__main__":
    app()
