"""CLI package: Typer-based command-line interface.

Usage:
    hotel-standards --help
    python -m hotel_standards.cli evaluate --help
"""

from hotel_standards.cli._app import app

# Register command modules (side-effect imports)
import hotel_standards.cli.cmd_inspect  # noqa: F401
import hotel_standards.cli.cmd_evaluate  # noqa: F401
import hotel_standards.cli.cmd_gap  # noqa: F401
import hotel_standards.cli.cmd_listing  # noqa: F401

__all__ = ["app"]
