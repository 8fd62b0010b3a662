"""
CLI main entry point.

This module provides the main entry point for the citoken CLI,
delegating to the command orchestrator.
"""


def main() -> None:
    """Main entry point for citoken CLI. Typer exits with the command's status."""
    # Import here to avoid circular imports
    from .orchestrator import app
    app()
