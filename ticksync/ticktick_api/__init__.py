"""
TickTick API layer package.
Implements the Open API client, its data models and the OAuth token flow.
"""

from .client import TickTickAPIError, TickTickClient
from .data_models import Priority, Project, SubTask, Task, TaskStatus
from .oauth import CredentialProvider, OAuthError, OAuthManager

__all__ = [
    'TickTickClient',
    'TickTickAPIError',
    'Task',
    'SubTask',
    'Project',
    'Priority',
    'TaskStatus',
    'CredentialProvider',
    'OAuthManager',
    'OAuthError',
]
