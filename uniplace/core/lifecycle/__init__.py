"""Application lifecycle and recruiter authorization."""

from .application_lifecycle import ApplicationLifecycleManager
from .authorization import Authorizer

__all__ = [
    "ApplicationLifecycleManager",
    "Authorizer",
]
