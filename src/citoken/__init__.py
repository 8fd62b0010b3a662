"""
citoken - OAuth test-token lifecycle tool for CI-tested packages.

Acquires an OAuth2 token, stores it as a test fixture, encrypts it for
version control, wires the CI decrypt step and keeps the ignore lists and
release branches consistent with the encrypted-file pattern.

Usage:
    # CLI (recommended)
    citoken setup

    # Programmatic
    from citoken.application.container import Container

    container = Container(project_dir=Path("."))
    issues = container.workflow_service.check()
"""

__version__ = "0.1.0"
__author__ = "citoken Team"

__all__ = ["__version__"]
