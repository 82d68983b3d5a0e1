"""Entry point for ``python -m dynaform``."""

from dynaform.cli import app

if __name__ == "__main__":
    app()
