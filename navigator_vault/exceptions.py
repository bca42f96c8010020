"""
Vault Exceptions — Error taxonomy for authentication recovery and API calls.

Two families:
    - ``AuthRecoveryError``: raised by login flows and the re-authentication
      dispatcher. When raised during recovery, the retry wrapper never lets
      them escape on their own; the original operation error is surfaced
      instead, with the recovery error as its ``__cause__``.
    - ``VaultAPIError``: raised by the public read/list/KV helpers when a
      response cannot be interpreted.

Security Note:
    Messages name paths and methods only, never tokens or credential values.
"""


class NavigatorVaultError(RuntimeError):
    """Base error for navigator_vault."""


class AuthRecoveryError(NavigatorVaultError):
    """Authentication could not be (re-)established."""


class CooldownActive(AuthRecoveryError):
    """A login was attempted too recently to try again."""


class NotAuthRelated(AuthRecoveryError):
    """The current token is healthy, the failure was not about auth."""


class UnknownAuthMethod(AuthRecoveryError):
    """No authentication method is cached that could be replayed."""


class LoginFailed(AuthRecoveryError):
    """The backend rejected the login or returned no auth payload."""


class CredentialSourceUnavailable(AuthRecoveryError):
    """A credential file could not be read."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class TokenCacheWriteFailed(AuthRecoveryError):
    """A token was obtained but could not be written to the token file.

    The token is already installed on the connection; it is kept on
    ``token`` so callers may keep using the session.
    """

    def __init__(self, message: str, path: str, token: str):
        super().__init__(message)
        self.path = path
        self.token = token

    def __repr__(self) -> str:
        return f"TokenCacheWriteFailed(path={self.path!r})"


class VaultAPIError(NavigatorVaultError):
    """A Vault response could not be used."""


class SecretNotFound(VaultAPIError):
    """Nothing was found at the requested path."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class MountNotFound(VaultAPIError):
    """The requested auth mount does not exist."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
