"""
CLI command groups.

One module per group; each exposes a Typer sub-app wired in the orchestrator.
"""
