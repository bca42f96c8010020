"""
Auth Cache — Which method authenticated last, when, and with what.

The cache is owned by a single ``VaultAPI`` and shared by reference with
the login flows and the re-authentication dispatcher. It keeps one
credential set per method, so switching methods and back does not lose
parameters, but only the active method is ever replayed.
"""
import time
import threading
from typing import Callable, Optional

from .credentials import AuthCredentials, AuthMethod


class AuthCache:
    """Authentication state for one Vault connection.

    ``lock`` is re-entrant: the dispatcher holds it for a whole recovery,
    and login flows invoked from there take it again.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.RLock()
        self._active_method: AuthMethod = AuthMethod.NONE
        self._last_attempt: float = 0.0
        self._last_success: float = 0.0
        self._credentials: dict[AuthMethod, AuthCredentials] = {}

    def __repr__(self) -> str:
        return (
            f"<AuthCache [method:{self._active_method.value}, "
            f"last_attempt:{self._last_attempt}] "
            f"known={sorted(m.value for m in self._credentials)}>"
        )

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def active_method(self) -> AuthMethod:
        return self._active_method

    @property
    def last_attempt(self) -> float:
        return self._last_attempt

    @property
    def active_credentials(self) -> Optional[AuthCredentials]:
        return self._credentials.get(self._active_method)

    def credentials_for(self, method: AuthMethod) -> Optional[AuthCredentials]:
        """Return the last credentials recorded for ``method``, if any."""
        return self._credentials.get(method)

    def seconds_since_last_attempt(self) -> float:
        return self._clock() - self._last_attempt

    @property
    def last_success(self) -> float:
        return self._last_success

    def record_attempt(self, credentials: Optional[AuthCredentials] = None) -> float:
        """Stamp the current time as the last authentication attempt.

        When ``credentials`` are given, their method becomes the active one,
        even if the attempt later fails.
        """
        with self._lock:
            # never move backwards, even if the wall clock does
            self._last_attempt = max(self._last_attempt, self._clock())
            if credentials is not None:
                self._active_method = credentials.method
                self._credentials[credentials.method] = credentials
            return self._last_attempt

    def record_success(self, credentials: AuthCredentials) -> None:
        """Stamp time, mark ``credentials.method`` active and remember its parameters."""
        with self._lock:
            self._last_success = self.record_attempt(credentials)
