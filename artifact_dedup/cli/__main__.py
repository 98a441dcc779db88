"""CLI entry point.

Allows running the CLI as a module: python -m artifact_dedup.cli
"""

from artifact_dedup.cli import app

if __name__ == "__main__":
    app()
