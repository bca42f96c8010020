"""
Re-authentication Dispatcher — Decide whether a failure is an auth problem
and, if so, replay the last login method.

``check_auth_needed()`` is only called after an operation already failed.
Returning normally means a new token is installed and the operation may be
retried once; raising an ``AuthRecoveryError`` means the original failure
must be surfaced as-is.
"""
import logging

from ..config import VaultConfig
from ..exceptions import CooldownActive, NotAuthRelated, UnknownAuthMethod
from .cache import AuthCache
from .credentials import (
    ApproleCredentials,
    AuthCredentials,
    KubernetesCredentials,
    LDAPCredentials,
    TokenCredentials,
)
from .health import token_needs_refresh
from .login import LoginFlows

logger = logging.getLogger("navigator.vault")


class ReauthDispatcher:
    """Recovery decision core for one Vault connection."""

    def __init__(self, flows: LoginFlows, cache: AuthCache, config: VaultConfig):
        self.flows = flows
        self.cache = cache
        self.config = config

    def check_auth_needed(self) -> None:
        """Re-authenticate if the failure that just happened was due to the token.

        Raises:
            CooldownActive: A recovery was attempted less than
                ``auth_cooldown`` seconds ago.
            NotAuthRelated: The token is still healthy.
            UnknownAuthMethod: No login has ever been performed.
            AuthRecoveryError: Any failure of the replayed login flow.
        """
        with self.cache.lock:
            elapsed = self.cache.seconds_since_last_attempt()
            self.cache.record_attempt()
            if elapsed < self.config.auth_cooldown:
                raise CooldownActive(
                    f"login was attempted {elapsed:.1f}s ago, not retrying"
                )

            if not token_needs_refresh(
                self.flows.connection, self.config.min_token_ttl
            ):
                raise NotAuthRelated("vault token does not need refreshing")

            credentials = self.cache.active_credentials
            if credentials is None:
                raise UnknownAuthMethod(
                    "unknown previous auth method or no authentication performed: "
                    f"[{self.cache.active_method.value}]"
                )
            logger.info("Re-authenticating to Vault using %s", credentials.method.value)
            self.replay(credentials)

    def replay(self, credentials: AuthCredentials) -> None:
        """Run the login flow matching ``credentials`` with its cached parameters."""
        flows = self.flows
        if isinstance(credentials, ApproleCredentials):
            if credentials.uses_files:
                flows.init_approle(
                    credentials.role_id_file,
                    credentials.secret_id_file,
                    credentials.token_file,
                    credentials.auth_path,
                )
            else:
                flows.approle_login(
                    credentials.role_id,
                    credentials.secret_id.get_secret_value(),
                    credentials.auth_path,
                )
        elif isinstance(credentials, KubernetesCredentials):
            flows.kubernetes_login(
                credentials.jwt.get_secret_value(),
                credentials.role,
                credentials.auth_path,
            )
        elif isinstance(credentials, LDAPCredentials):
            flows.ldap_login(
                credentials.username,
                credentials.password.get_secret_value(),
                credentials.auth_path,
            )
        elif isinstance(credentials, TokenCredentials):
            # a bare token cannot refresh itself; let the retry tell
            self.cache.record_attempt()
            logger.debug("Static token in use, retrying without re-authentication")
        else:
            raise UnknownAuthMethod(
                f"unknown previous auth method: [{credentials.method}]"
            )
