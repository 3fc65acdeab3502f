"""GoTrue Python client - session-aware client for GoTrue authentication services."""

from importlib.metadata import PackageNotFoundError, version

from ._async import AsyncApi
from ._sync import Api
from .async_client import AsyncGoTrueClient
from .client import GoTrueClient
from .exceptions import (
    ConfigurationError,
    GoTrueError,
    InternalError,
    MissingRefreshTokenError,
    NotAuthenticatedError,
    TransportError,
)
from .types import (
    AdminUserAttributes,
    CredentialSelector,
    Email,
    Phone,
    Session,
    User,
    UserAttributes,
    VerifyOtpParams,
    selector_from,
)

__all__ = [
    "GoTrueClient",
    "AsyncGoTrueClient",
    "Api",
    "AsyncApi",
    "Email",
    "Phone",
    "CredentialSelector",
    "selector_from",
    "Session",
    "User",
    "UserAttributes",
    "AdminUserAttributes",
    "VerifyOtpParams",
    "GoTrueError",
    "ConfigurationError",
    "TransportError",
    "NotAuthenticatedError",
    "MissingRefreshTokenError",
    "InternalError",
]

try:
    __version__ = version("gotrue-client")
except PackageNotFoundError:
    __version__ = "0.1.0"
