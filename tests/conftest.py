"""Shared fixtures: an in-memory Vault connection and a controllable clock."""
import threading

import pytest
from hvac.exceptions import Forbidden

from navigator_vault import VaultAPI, VaultConfig


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeConnection:
    """In-memory stand-in for VaultConnection.

    Tokens are valid while their TTL is positive; operations with an
    unknown or expired token raise Forbidden, like Vault does.
    """

    def __init__(self):
        self.token = None
        self.ttls: dict[str, int] = {}
        self.login_calls: list[tuple[str, dict]] = []
        self.login_responses: list = []
        self.data: dict[str, dict] = {}
        self.lists: dict[str, dict] = {}
        self.broken: dict[str, Exception] = {}
        self.calls: list[tuple[str, str]] = []
        self.lookups = 0
        self.revoked: list[str] = []
        self.expired_barrier: threading.Barrier | None = None

    # -- helpers for tests --
    def issue(self, *tokens: str) -> None:
        """Queue tokens returned by the next login calls."""
        self.login_responses.extend(tokens)

    def expire(self, token: str) -> None:
        self.ttls[token] = 0

    def _check_token(self) -> None:
        if self.ttls.get(self.token, 0) <= 0:
            if self.expired_barrier is not None:
                self.expired_barrier.wait(timeout=5)
            raise Forbidden("permission denied")

    # -- connection interface --
    def set_token(self, token: str) -> None:
        self.token = token

    def login(self, path: str, payload: dict):
        self.login_calls.append((path, payload))
        response = self.login_responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return {"data": {}}
        self.ttls.setdefault(response, 3600)
        return {"auth": {"client_token": response, "lease_duration": 3600}}

    def lookup_self(self) -> dict:
        self.lookups += 1
        if self.token not in self.ttls:
            raise Forbidden("permission denied")
        return {"data": {"ttl": self.ttls[self.token]}}

    def revoke_self(self) -> None:
        self.revoked.append(self.token)
        self.ttls.pop(self.token, None)

    def _operation(self, name: str, path: str) -> None:
        self.calls.append((name, path))
        if path in self.broken:
            raise self.broken[path]
        self._check_token()

    def read(self, path: str):
        self._operation("read", path)
        return self.data.get(path)

    def write(self, path: str, data: dict):
        self._operation("write", path)
        self.data[path] = {"data": data}
        return {"data": {"version": 1}}

    def list(self, path: str):
        self._operation("list", path)
        return self.lists.get(path)

    def delete(self, path: str) -> None:
        self._operation("delete", path)
        self.data.pop(path, None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def config():
    return VaultConfig(url="http://vault.test:8200")


@pytest.fixture
def api(config, connection, clock):
    """A VaultAPI bound to the fake connection, not yet authenticated."""
    return VaultAPI(config=config, connection=connection, clock=clock)


@pytest.fixture
def approle_files(tmp_path):
    """role-id / secret-id files as written by a Vault agent, plus a token path."""
    role_id_file = tmp_path / "role-id"
    secret_id_file = tmp_path / "secret-id"
    role_id_file.write_text("role-id\n", encoding="utf-8")
    secret_id_file.write_text("secret-id\n", encoding="utf-8")
    return role_id_file, secret_id_file, tmp_path / "token"
