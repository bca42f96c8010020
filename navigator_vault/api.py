"""
VaultAPI — Public entry point: a Vault connection that stays authenticated.

Provides:
- login entry points (``approle_login``, ``init_approle``,
  ``kubernetes_login``, ``ldap_login``, ``set_token``)
- raw backend operations (``read``, ``write``, ``delete``, ``list``) and
  helpers derived from them, each retried once after re-authentication
  when the failure is caused by an expired token
- token inspection (``get_token_ttl``, ``token_needs_refresh``,
  ``revoke_self``)

Security Note:
    Never log secret values or tokens. Only log paths and auth methods.
"""
import time
import logging
from typing import Any, Callable, List, Optional, TypeVar

from .auth import (
    AuthCache,
    AuthMethod,
    LoginFlows,
    ReauthDispatcher,
    get_token_ttl,
    token_needs_refresh,
)
from .config import VaultConfig
from .connection import VaultConnection
from .exceptions import MountNotFound, SecretNotFound, VaultAPIError
from .kv import KVMixin
from .retry import perform_with_retry
from .utils import auth_mount_name, base64_smart_decode

T = TypeVar("T")

logger = logging.getLogger("navigator.vault")


class VaultAPI(KVMixin):
    """HashiCorp Vault client with automatic re-authentication.

    Every backend operation is run through a retry-once wrapper: when it
    fails and the token turns out to be expired, the last login method is
    replayed with its cached parameters and the operation is retried
    exactly once.

    Logins and recovery are serialized on the auth cache lock within one
    process. The AppRole token cache file is not
    coordinated across processes: two processes sharing it may overwrite
    each other's token.
    """

    def __init__(
        self,
        config: Optional[VaultConfig] = None,
        connection: Any = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or VaultConfig.from_env()
        self.auth_cache = AuthCache(clock=clock)
        if connection is None:
            connection = VaultConnection.from_config(self.config)
        self._flows = LoginFlows(connection, self.auth_cache, self.config)
        self._dispatcher = ReauthDispatcher(self._flows, self.auth_cache, self.config)
        if self.config.token is not None:
            self.set_token(self.config.token.get_secret_value())

    def __repr__(self) -> str:
        return (
            f"<VaultAPI url={self.config.url!r} "
            f"auth={self.auth_cache.active_method.value}>"
        )

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    @property
    def connection(self) -> Any:
        return self._flows.connection

    @property
    def token(self) -> Optional[str]:
        return self.connection.token

    @property
    def auth_method(self) -> AuthMethod:
        return self.auth_cache.active_method

    def set_uri(self, uri: str) -> None:
        """Point the client at another Vault server.

        The auth cache and the current token are kept, so the next failing
        operation can still re-authenticate against the new server.
        """
        config = VaultConfig(**{**self.config.model_dump(), "url": uri})
        connection = VaultConnection.from_config(config)
        with self.auth_cache.lock:
            token = self.connection.token
            if token:
                connection.set_token(token)
            self.config = config
            self._flows.config = config
            self._dispatcher.config = config
            self._flows.connection = connection
        logger.info("Vault URI set to %s", config.url)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def set_token(self, token: str) -> None:
        """Use a pre-supplied token. Mostly for local use and tests, since
        a bare token cannot be refreshed once it expires."""
        self._flows.use_token(token)

    def approle_login(self, role_id: str, secret_id: str, auth_path: str = "") -> str:
        return self._flows.approle_login(role_id, secret_id, auth_path)

    def init_approle(
        self,
        role_id_file: str,
        secret_id_file: str,
        token_file: Optional[str] = None,
        auth_path: str = "",
    ) -> str:
        return self._flows.init_approle(role_id_file, secret_id_file, token_file, auth_path)

    def kubernetes_login(self, jwt: str, role: str, auth_path: str = "") -> str:
        return self._flows.kubernetes_login(jwt, role, auth_path)

    def ldap_login(self, username: str, password: str, auth_path: str = "") -> str:
        return self._flows.ldap_login(username, password, auth_path)

    def check_auth_needed(self) -> None:
        """Re-authenticate after a failure if the token is the problem.

        Raises:
            AuthRecoveryError: When no new token was installed.
        """
        self._dispatcher.check_auth_needed()

    def get_token_ttl(self) -> int:
        """Remaining TTL in seconds of the current token."""
        return get_token_ttl(self.connection)

    def token_needs_refresh(self, minimum_ttl: Optional[int] = None) -> bool:
        if minimum_ttl is None:
            minimum_ttl = self.config.min_token_ttl
        return token_needs_refresh(self.connection, minimum_ttl)

    def revoke_self(self) -> None:
        """Revoke the current token."""
        self.connection.revoke_self()
        logger.info("Vault token revoked")

    def perform_with_retry(self, operation: Callable[..., T], *args, **kwargs) -> T:
        """Run ``operation``, re-authenticating and retrying once if its failure was auth related."""
        return perform_with_retry(operation, self.check_auth_needed, *args, **kwargs)

    # ------------------------------------------------------------------
    # Backend operations
    # ------------------------------------------------------------------

    def read(self, path: str) -> dict[str, Any]:
        """Raw read against the Vault API.

        Raises:
            SecretNotFound: If nothing exists at ``path``.
        """
        secret = self.perform_with_retry(self.connection.read, path)
        if secret is None:
            raise SecretNotFound(f"secret not found: {path}", path=path)
        return secret

    def write(self, path: str, data: dict[str, Any]) -> Optional[dict]:
        """Raw write against the Vault API; returns the response body, if any."""
        return self.perform_with_retry(self.connection.write, path, data)

    def delete(self, path: str) -> None:
        self.perform_with_retry(self.connection.delete, path)
        logger.debug("Vault delete: path=%s", path)

    def list(self, path: str) -> list[str]:
        """Return the keys under a metadata ``path``.

        Raises:
            SecretNotFound: If nothing exists at ``path``.
        """
        response = self.perform_with_retry(self.connection.list, path)
        if response is None:
            raise SecretNotFound(f"unable to find specified path: {path}", path=path)
        return list((response.get("data") or {}).get("keys") or [])

    def _auth_mounts(self) -> dict[str, Any]:
        return self.read("sys/auth").get("data") or {}

    def get_auth_type(self, path: str) -> str:
        """Return the auth backend type (``ldap``, ``approle``...) mounted at ``path``.

        Raises:
            MountNotFound: If no auth backend is mounted at ``path``.
            VaultAPIError: If ``sys/auth`` returns an unexpected mount entry.
        """
        mount = auth_mount_name(path)
        for cluster_mount, mount_config in self._auth_mounts().items():
            if cluster_mount != mount:
                continue
            if not isinstance(mount_config, dict):
                raise VaultAPIError("failed to work with data from sys/auth")
            return mount_config.get("type", "")
        raise MountNotFound(f"mount not found: {mount}", path=mount)

    def get_auth_mounts_by_type(self, auth_type: str, prefix_match: str = "") -> List[str]:
        """Return every auth mount of ``auth_type`` whose name starts with ``prefix_match``."""
        mounts = []
        for cluster_mount, mount_config in self._auth_mounts().items():
            if not isinstance(mount_config, dict):
                raise VaultAPIError("failed to work with data from sys/auth")
            if not cluster_mount.startswith(prefix_match):
                continue
            if mount_config.get("type") == auth_type:
                mounts.append(cluster_mount)
        return mounts

    base64_smart_decode = staticmethod(base64_smart_decode)
