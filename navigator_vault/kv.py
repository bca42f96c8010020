"""KV secrets engine helpers built on top of the retried read/write calls."""
from typing import Any, Optional

from .exceptions import VaultAPIError


class KVMixin:
    """KV v1/v2 conveniences for a client exposing ``read`` and ``write``."""

    def get_kv(self, path: str, return_only_data: bool = False) -> dict[str, Any]:
        """Return the secret stored at ``path``.

        Works for KV v1 and v2 mounts. For v2 the values are nested under
        ``data``; pass ``return_only_data=True`` to get them directly.

        Raises:
            SecretNotFound: If nothing exists at ``path``.
            VaultAPIError: If ``return_only_data`` is set and the secret has
                no nested ``data`` mapping.
        """
        secret = self.read(path)
        data = secret.get("data") or {}
        if return_only_data:
            nested = data.get("data")
            if not isinstance(nested, dict):
                raise VaultAPIError(f"unable to read requested secret at {path}")
            return nested
        return data

    def put_kv2(self, path: str, data: dict[str, Any]) -> Optional[dict]:
        """Write ``data`` to a KV v2 ``path``, wrapping it the way v2 expects."""
        return self.write(path, {"data": data})
