"""
Vault Configuration — Connection and re-authentication settings.

Reads settings from the standard Vault environment variables:
    VAULT_ADDR = <server URL>
    VAULT_TOKEN = <initial token, optional>
    VAULT_NAMESPACE = <enterprise namespace, optional>
    VAULT_CACERT = <CA bundle path> / VAULT_SKIP_VERIFY = <true|false>
    VAULT_CLIENT_TIMEOUT = <seconds>

and the re-authentication tunables:
    VAULT_AUTH_COOLDOWN = <seconds between recovery attempts>
    VAULT_MIN_TOKEN_TTL = <seconds a token must still be valid>
    VAULT_STRICT_TOKEN_CACHE = <true|false>

Security Note:
    Never log the token. ``VaultConfig.token`` is a SecretStr.
"""
import os
import logging
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, SecretStr, field_validator

logger = logging.getLogger("navigator.vault")

DEFAULT_VAULT_ADDR = "http://127.0.0.1:8200"
# minimum seconds between two re-authentication attempts
DEFAULT_AUTH_COOLDOWN = 5.0
# a token with less remaining TTL than this is considered expired
DEFAULT_MIN_TOKEN_TTL = 5

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean flag from the environment, None when unset."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip().lower() in _TRUE_VALUES


def load_verify() -> Union[bool, str]:
    """Resolve TLS verification from VAULT_CACERT / VAULT_SKIP_VERIFY.

    Returns:
        The CA bundle path when VAULT_CACERT is set, False when
        VAULT_SKIP_VERIFY is truthy, True otherwise.
    """
    cacert = os.environ.get("VAULT_CACERT")
    if cacert:
        return cacert
    if _env_flag("VAULT_SKIP_VERIFY"):
        logger.warning("TLS verification disabled by VAULT_SKIP_VERIFY")
        return False
    return True


class VaultConfig(BaseModel):
    """Validated Vault client configuration."""

    url: str = Field(default=DEFAULT_VAULT_ADDR)
    token: Optional[SecretStr] = None
    namespace: Optional[str] = None
    verify: Union[bool, str] = True
    timeout: int = Field(default=30, ge=1, le=600)
    auth_cooldown: float = Field(default=DEFAULT_AUTH_COOLDOWN, ge=0)
    min_token_ttl: int = Field(default=DEFAULT_MIN_TOKEN_TTL, ge=0)
    strict_token_cache: bool = False

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL, without trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Vault URL must start with http:// or https://: {v!r}")
        return v.rstrip("/")

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty namespace as no namespace."""
        if v is not None and not v.strip():
            return None
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Args:
            **overrides: explicit values taking precedence over the environment.

        Returns:
            Populated VaultConfig instance.
        """
        values: dict[str, Any] = {"verify": load_verify()}
        env_map = {
            "url": "VAULT_ADDR",
            "token": "VAULT_TOKEN",
            "namespace": "VAULT_NAMESPACE",
            "timeout": "VAULT_CLIENT_TIMEOUT",
            "auth_cooldown": "VAULT_AUTH_COOLDOWN",
            "min_token_ttl": "VAULT_MIN_TOKEN_TTL",
        }
        for field, env_name in env_map.items():
            value = os.environ.get(env_name)
            if value:
                values[field] = value
        strict = _env_flag("VAULT_STRICT_TOKEN_CACHE")
        if strict is not None:
            values["strict_token_cache"] = strict
        values.update(overrides)
        return cls(**values)
