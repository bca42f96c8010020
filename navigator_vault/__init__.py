"""Navigator Vault — HashiCorp Vault client that stays authenticated.

Tokens obtained through AppRole, Kubernetes, LDAP or set directly are
tracked in an auth cache; operations failing on an expired token are
re-authenticated with the last used method and retried once.
"""

from .version import __version__
from .api import VaultAPI
from .config import VaultConfig
from .auth import AuthMethod
from .exceptions import (
    NavigatorVaultError,
    AuthRecoveryError,
    CooldownActive,
    NotAuthRelated,
    UnknownAuthMethod,
    LoginFailed,
    CredentialSourceUnavailable,
    TokenCacheWriteFailed,
    VaultAPIError,
    SecretNotFound,
    MountNotFound,
)

__all__ = [
    "__version__",
    "VaultAPI",
    "VaultConfig",
    "AuthMethod",
    "NavigatorVaultError",
    "AuthRecoveryError",
    "CooldownActive",
    "NotAuthRelated",
    "UnknownAuthMethod",
    "LoginFailed",
    "CredentialSourceUnavailable",
    "TokenCacheWriteFailed",
    "VaultAPIError",
    "SecretNotFound",
    "MountNotFound",
]
