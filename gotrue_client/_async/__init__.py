"""Async transport classes for the GoTrue client."""

from .admin import AsyncAdminNamespace
from .api import AsyncApi

__all__ = [
    "AsyncApi",
    "AsyncAdminNamespace",
]
