"""Authentication state machine and re-authentication.

The auth cache remembers the last login method and its parameters; the
dispatcher replays that method when an operation fails on an expired
token.
"""

from .cache import AuthCache
from .credentials import (
    AuthMethod,
    AuthCredentials,
    ApproleCredentials,
    KubernetesCredentials,
    LDAPCredentials,
    TokenCredentials,
)
from .health import get_token_ttl, token_needs_refresh
from .login import LoginFlows
from .dispatcher import ReauthDispatcher

__all__ = [
    "AuthCache",
    "AuthMethod",
    "AuthCredentials",
    "ApproleCredentials",
    "KubernetesCredentials",
    "LDAPCredentials",
    "TokenCredentials",
    "get_token_ttl",
    "token_needs_refresh",
    "LoginFlows",
    "ReauthDispatcher",
]
