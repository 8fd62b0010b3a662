"""Interface layer: the Typer command-line application."""
