"""
Retry-Once Wrapper — Run a Vault operation, recover auth once on failure.

The policy is strict: at most one recovery and one extra attempt, no
backoff beyond the dispatcher's cooldown. A failure of the second attempt
is raised as-is.
"""
import logging
from typing import Callable, TypeVar

from hvac.exceptions import VaultError
from requests.exceptions import RequestException

from .exceptions import AuthRecoveryError

T = TypeVar("T")

logger = logging.getLogger("navigator.vault")

# errors the backend connection surfaces for a failed operation
OPERATION_ERRORS = (VaultError, RequestException)

MAX_ATTEMPTS = 2


def perform_with_retry(
    operation: Callable[..., T],
    recover: Callable[[], None],
    *args,
    **kwargs,
) -> T:
    """Call ``operation(*args, **kwargs)``, retrying once after a successful ``recover()``.

    Args:
        operation: The backend call.
        recover: Re-authentication hook; returns normally when a new token
            was installed, raises ``AuthRecoveryError`` otherwise.

    Returns:
        The result of the first successful attempt.

    Raises:
        The operation's original error when recovery is declined or fails
        (the recovery error is attached as ``__cause__``), or the error of
        the retried attempt.
    """
    name = getattr(operation, "__name__", repr(operation))
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            return operation(*args, **kwargs)
        except OPERATION_ERRORS as err:
            if attempt == MAX_ATTEMPTS:
                raise
            failure = err
        try:
            recover()
        except AuthRecoveryError as recovery:
            logger.debug(
                "Vault %s failed, no re-authentication: %s", name, recovery
            )
            raise failure from recovery
        logger.info("Vault %s failed on expired token, retrying once", name)
    # unreachable: the last attempt either returns or raises
    raise RuntimeError(f"{name}: retry loop exhausted")
