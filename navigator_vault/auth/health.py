"""Token Health Check — remaining TTL of the active token."""
import logging
from typing import Any

logger = logging.getLogger("navigator.vault")


def get_token_ttl(connection: Any) -> int:
    """Return the remaining TTL (seconds) of the connection's token.

    Raises:
        Whatever the self-lookup raises, or ValueError if the response
        carries no usable ``ttl``.
    """
    response = connection.lookup_self()
    data = (response or {}).get("data") or {}
    ttl = data.get("ttl")
    if isinstance(ttl, bool) or ttl is None:
        raise ValueError("token lookup-self returned no ttl")
    try:
        return int(ttl)
    except (TypeError, ValueError) as err:
        raise ValueError(f"token lookup-self returned invalid ttl: {ttl!r}") from err


def token_needs_refresh(connection: Any, minimum_ttl: int) -> bool:
    """True if the token is unreadable or expires in less than ``minimum_ttl`` seconds."""
    try:
        ttl = get_token_ttl(connection)
    except Exception as err:  # an unreadable token is assumed invalid
        logger.debug("Token lookup failed (%s), refresh needed", type(err).__name__)
        return True
    if ttl < minimum_ttl:
        logger.debug("Token ttl=%ss below minimum %ss", ttl, minimum_ttl)
        return True
    return False
