"""
Credential Store — Parameters needed to replay each authentication method.

Each method is a frozen pydantic model tagged by ``method``; the
``AuthCredentials`` union is discriminated on that tag, so the active
method and its parameters always travel together.

Security Note:
    secret_id, jwt and password are SecretStr and never show up in repr().
"""
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class AuthMethod(str, Enum):
    """Authentication methods known to the auth cache."""
    NONE = "none"
    APPROLE = "approle"
    KUBERNETES = "kubernetes"
    LDAP = "ldap"
    TOKEN = "token"


APPROLE_AUTH_PATH = "auth/approle"
KUBERNETES_AUTH_PATH = "auth/kubernetes"
LDAP_AUTH_PATH = "auth/ldap"


class _Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)


class ApproleCredentials(_Credentials):
    """Role-id / secret-id pair, optionally sourced from files."""

    method: Literal[AuthMethod.APPROLE] = AuthMethod.APPROLE
    role_id: str = ""
    secret_id: SecretStr = SecretStr("")
    role_id_file: Optional[str] = None
    secret_id_file: Optional[str] = None
    token_file: Optional[str] = None
    auth_path: str = APPROLE_AUTH_PATH

    @property
    def uses_files(self) -> bool:
        """True when role-id and secret-id are re-read from disk on replay."""
        return bool(self.role_id_file and self.secret_id_file)


class KubernetesCredentials(_Credentials):
    """Service account JWT and the Vault role it maps to."""

    method: Literal[AuthMethod.KUBERNETES] = AuthMethod.KUBERNETES
    jwt: SecretStr
    role: str
    auth_path: str = KUBERNETES_AUTH_PATH


class LDAPCredentials(_Credentials):
    """Directory bind username / password."""

    method: Literal[AuthMethod.LDAP] = AuthMethod.LDAP
    username: str
    password: SecretStr
    auth_path: str = LDAP_AUTH_PATH


class TokenCredentials(_Credentials):
    """A bare pre-supplied token; nothing to replay."""

    method: Literal[AuthMethod.TOKEN] = AuthMethod.TOKEN


AuthCredentials = Annotated[
    Union[ApproleCredentials, KubernetesCredentials, LDAPCredentials, TokenCredentials],
    Field(discriminator="method"),
]
