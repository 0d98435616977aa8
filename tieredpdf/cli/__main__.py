"""CLI entry point.

Allows running the CLI as a module: python -m tieredpdf.cli
"""

from tieredpdf.cli import app

if __name__ == "__main__":
    app()
