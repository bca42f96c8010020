"""
Login Flows — Trade method-specific credentials for a Vault token.

Every flow performs exactly one login call. Before the call the method
is recorded as active and the attempt is stamped; on success the
credentials are recorded and the returned token is installed on the
connection, all while holding the auth cache lock.

Security Note:
    Never log credential values or tokens. Only log methods, paths and
    file locations.
"""
import os
import logging
from typing import Any, Optional

from hvac.exceptions import VaultError
from pydantic import SecretStr
from requests.exceptions import RequestException

from ..config import VaultConfig
from ..exceptions import (
    CredentialSourceUnavailable,
    LoginFailed,
    TokenCacheWriteFailed,
)
from ..utils import resolve_auth_path
from .cache import AuthCache
from .credentials import (
    APPROLE_AUTH_PATH,
    KUBERNETES_AUTH_PATH,
    LDAP_AUTH_PATH,
    ApproleCredentials,
    AuthMethod,
    AuthCredentials,
    KubernetesCredentials,
    LDAPCredentials,
    TokenCredentials,
)
from .health import token_needs_refresh

logger = logging.getLogger("navigator.vault")


def read_credential_file(path: str, label: str) -> str:
    """Read a single credential value from ``path``, minus one trailing newline.

    Raises:
        CredentialSourceUnavailable: If the file cannot be read.
    """
    try:
        with open(path, encoding="utf-8") as fp:
            value = fp.read()
    except (OSError, UnicodeDecodeError) as err:
        raise CredentialSourceUnavailable(
            f"error occurred while trying to read {label} from file: {path}",
            path=path,
        ) from err
    return value.removesuffix("\n")


def read_token_file(path: Optional[str]) -> str:
    """Return the cached token in ``path``, or an empty string if there is none."""
    if not path:
        return ""
    try:
        with open(path, encoding="utf-8") as fp:
            return fp.read().removesuffix("\n")
    except (OSError, UnicodeDecodeError):
        return ""


def write_token_file(path: str, token: str) -> None:
    """Create or truncate ``path`` and write ``token`` to it, owner-readable only."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as fp:
        fp.write(token)


class LoginFlows:
    """Login entry points bound to one connection and its auth cache.

    ``connection`` is any object providing ``login(path, payload)``,
    ``lookup_self()``, ``set_token(token)`` and ``token``; it is replaced
    when the owning client changes its server URI.
    """

    def __init__(self, connection: Any, cache: AuthCache, config: VaultConfig):
        self.connection = connection
        self.cache = cache
        self.config = config

    # ------------------------------------------------------------------
    # Shared login call
    # ------------------------------------------------------------------

    def _login(self, credentials: AuthCredentials, path: str, payload: dict) -> str:
        method = credentials.method.value
        with self.cache.lock:
            self.cache.record_attempt(credentials)
            try:
                response = self.connection.login(path, payload)
            except (VaultError, RequestException) as err:
                logger.warning(
                    "Vault %s login failed at %s: %s", method, path, type(err).__name__
                )
                raise LoginFailed(f"{method} login failed at {path}: {err}") from err

            auth = response.get("auth") if isinstance(response, dict) else None
            if not auth or not auth.get("client_token"):
                raise LoginFailed(f"no auth info returned from {path}")

            token = auth["client_token"]
            self.cache.record_success(credentials)
            self.connection.set_token(token)

        logger.info(
            "Vault %s login succeeded: path=%s lease_duration=%s",
            method, path, auth.get("lease_duration"),
        )
        return token

    # ------------------------------------------------------------------
    # Public flows
    # ------------------------------------------------------------------

    def approle_login(self, role_id: str, secret_id: str, auth_path: str = "") -> str:
        """Log in with an AppRole role-id / secret-id pair.

        Args:
            role_id: AppRole role-id.
            secret_id: AppRole secret-id.
            auth_path: Mount path of the approle backend (default ``auth/approle``).

        Returns:
            The new client token, already installed on the connection.

        Raises:
            LoginFailed: If Vault rejects the login or returns no auth info.
        """
        auth_path = resolve_auth_path(auth_path, APPROLE_AUTH_PATH)
        credentials = ApproleCredentials(
            role_id=role_id,
            secret_id=SecretStr(secret_id),
            auth_path=auth_path,
        )
        return self._approle_network_login(credentials)

    def _approle_network_login(self, credentials: ApproleCredentials) -> str:
        payload = {
            "role_id": credentials.role_id,
            "secret_id": credentials.secret_id.get_secret_value(),
        }
        return self._login(credentials, f"{credentials.auth_path}/login", payload)

    def init_approle(
        self,
        role_id_file: str,
        secret_id_file: str,
        token_file: Optional[str] = None,
        auth_path: str = "",
    ) -> str:
        """Obtain a token via AppRole credentials stored on disk.

        A previously cached token in ``token_file`` is reused when it is
        still healthy; otherwise a fresh login is performed and the new
        token is written to ``token_file``.

        Args:
            role_id_file: File containing the role-id.
            secret_id_file: File containing the secret-id.
            token_file: Token cache file, optional.
            auth_path: Mount path of the approle backend. When empty, the
                mount of the last AppRole login is reused, falling back to
                ``auth/approle``.

        Returns:
            The active client token.

        Raises:
            CredentialSourceUnavailable: If a credential file cannot be read.
            LoginFailed: If the login is rejected.
            TokenCacheWriteFailed: Only with ``strict_token_cache`` enabled,
                when the fresh token cannot be written.
        """
        if not auth_path:
            previous = self.cache.credentials_for(AuthMethod.APPROLE)
            if previous is not None:
                auth_path = previous.auth_path
        auth_path = resolve_auth_path(auth_path, APPROLE_AUTH_PATH)
        credentials = ApproleCredentials(
            role_id_file=role_id_file,
            secret_id_file=secret_id_file,
            token_file=token_file or None,
            auth_path=auth_path,
        )
        with self.cache.lock:
            # remember the files first, so recovery can retry reading them
            self.cache.record_attempt(credentials)
            credentials = credentials.model_copy(
                update={
                    "role_id": read_credential_file(role_id_file, "role-id"),
                    "secret_id": SecretStr(
                        read_credential_file(secret_id_file, "secret-id")
                    ),
                }
            )
            self.cache.record_attempt(credentials)

            cached_token = read_token_file(token_file)
            if cached_token:
                self.connection.set_token(cached_token)
                if not token_needs_refresh(self.connection, self.config.min_token_ttl):
                    self.cache.record_success(credentials)
                    logger.info("Reusing cached Vault token from %s", token_file)
                    return cached_token

            token = self._approle_network_login(credentials)

        if token_file:
            self._save_token(token_file, token)
        return token

    def _save_token(self, token_file: str, token: str) -> None:
        try:
            write_token_file(token_file, token)
        except OSError as err:
            if self.config.strict_token_cache:
                raise TokenCacheWriteFailed(
                    f"unable to write vault token file: {token_file}",
                    path=token_file,
                    token=token,
                ) from err
            logger.warning(
                "Unable to write vault token file %s: %s",
                token_file, err.strerror or type(err).__name__,
            )
        else:
            logger.debug("Vault token cached in %s", token_file)

    def kubernetes_login(self, jwt: str, role: str, auth_path: str = "") -> str:
        """Log in with a Kubernetes service account JWT.

        ``auth_path`` is the mount of the kubernetes backend, not the login
        endpoint: the call goes to ``{auth_path}/login``, so passing
        ``auth/kubernetes/login`` would end up at ``.../login/login``.

        Raises:
            LoginFailed: If Vault rejects the login or returns no auth info.
        """
        auth_path = resolve_auth_path(auth_path, KUBERNETES_AUTH_PATH)
        credentials = KubernetesCredentials(
            jwt=SecretStr(jwt), role=role, auth_path=auth_path,
        )
        return self._login(
            credentials,
            f"{auth_path}/login",
            {"jwt": jwt, "role": role},
        )

    def ldap_login(self, username: str, password: str, auth_path: str = "") -> str:
        """Log in with an LDAP username and password.

        The login call goes to ``{auth_path}/login/{username}``, so the
        default is ``auth/ldap/login/<username>``.

        Raises:
            LoginFailed: If Vault rejects the login or returns no auth info.
        """
        auth_path = resolve_auth_path(auth_path, LDAP_AUTH_PATH)
        credentials = LDAPCredentials(
            username=username, password=SecretStr(password), auth_path=auth_path,
        )
        return self._login(
            credentials,
            f"{auth_path}/login/{username}",
            {"password": password},
        )

    def use_token(self, token: str) -> None:
        """Install a pre-supplied token. It cannot be refreshed later."""
        with self.cache.lock:
            self.cache.record_success(TokenCredentials())
            self.connection.set_token(token)
        logger.debug("Vault token set directly")
