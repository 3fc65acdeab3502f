"""Sync transport classes for the GoTrue client."""

from .admin import AdminNamespace
from .api import Api

__all__ = [
    "Api",
    "AdminNamespace",
]
