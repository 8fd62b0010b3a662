"""
Application layer package.

Contains service classes that orchestrate the token workflow.
Services coordinate between domain models and infrastructure.
"""

from citoken.application.container import Container
from citoken.application.workflow_service import WorkflowService

__all__ = [
    "Container",
    "WorkflowService",
]
