"""
Vault Connection — Thin synchronous adapter over ``hvac.Client``.

This is the only module that talks to hvac. It exposes the handful of
calls the auth core and the public API need, with hvac's own exceptions
(``hvac.exceptions.VaultError`` and subclasses, or ``requests`` transport
errors) left to propagate.
"""
import logging
from typing import Any, Optional

import hvac

from .config import VaultConfig

logger = logging.getLogger("navigator.vault")


class VaultConnection:
    """A Vault server endpoint plus the session token currently in use."""

    def __init__(self, client: hvac.Client):
        self._client = client

    @classmethod
    def from_config(cls, config: VaultConfig) -> "VaultConnection":
        """Create an hvac client from a validated VaultConfig."""
        client = hvac.Client(
            url=config.url,
            token=config.token.get_secret_value() if config.token else None,
            namespace=config.namespace,
            verify=config.verify,
            timeout=config.timeout,
        )
        logger.debug(
            "Vault client created: url=%s namespace=%s", config.url, config.namespace
        )
        return cls(client)

    def __repr__(self) -> str:
        return f"<VaultConnection url={self._client.url!r}>"

    @property
    def client(self) -> hvac.Client:
        return self._client

    @property
    def token(self) -> Optional[str]:
        return self._client.token

    def set_token(self, token: str) -> None:
        self._client.token = token

    # ------------------------------------------------------------------
    # Auth calls
    # ------------------------------------------------------------------

    def login(self, path: str, payload: dict[str, Any]) -> Optional[dict]:
        """POST ``payload`` to a login endpoint and return the raw response.

        The token is not installed here; that is up to the login flow.
        """
        response = self._client.write_data(path, data=payload)
        return response if isinstance(response, dict) else None

    def lookup_self(self) -> dict:
        return self._client.auth.token.lookup_self()

    def revoke_self(self) -> None:
        self._client.auth.token.revoke_self()

    # ------------------------------------------------------------------
    # Logical backend calls
    # ------------------------------------------------------------------

    def read(self, path: str) -> Optional[dict]:
        """Read ``path``; None when nothing exists there."""
        return self._client.read(path)

    def write(self, path: str, data: dict[str, Any]) -> Optional[dict]:
        """Write ``data`` to ``path``; None when Vault returns no body."""
        response = self._client.write_data(path, data=data)
        return response if isinstance(response, dict) else None

    def list(self, path: str) -> Optional[dict]:
        """List keys under ``path``; None when nothing exists there."""
        return self._client.list(path)

    def delete(self, path: str) -> None:
        self._client.delete(path)
