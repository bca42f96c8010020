"""
Tests for the re-authentication dispatcher (check_auth_needed).

Tests cover:
- Cooldown guard and timestamp stamping on blocked checks
- Healthy tokens reported as not auth related
- Replay of each cached method with its cached parameters
- Static tokens and the never-authenticated state
- Independent cooldown / minimum TTL settings
"""
import pytest
from hvac.exceptions import InvalidRequest

from navigator_vault import (
    AuthMethod,
    CooldownActive,
    LoginFailed,
    NotAuthRelated,
    UnknownAuthMethod,
    VaultAPI,
    VaultConfig,
)


class TestCooldownGuard:

    def test_too_soon_after_login(self, api, connection, clock):
        connection.issue("t-1")
        api.approle_login("role", "secret")
        connection.expire("t-1")
        clock.advance(2)
        with pytest.raises(CooldownActive):
            api.check_auth_needed()
        assert len(connection.login_calls) == 1

    def test_blocked_check_stamps_time(self, api, connection, clock):
        connection.issue("t-1")
        api.approle_login("role", "secret")
        clock.advance(3)
        with pytest.raises(CooldownActive):
            api.check_auth_needed()
        assert api.auth_cache.last_attempt == clock.now

    def test_after_cooldown_recovers(self, api, connection, clock):
        connection.issue("t-1", "t-2")
        api.approle_login("role", "secret")
        connection.expire("t-1")
        clock.advance(5)
        api.check_auth_needed()
        assert connection.token == "t-2"

    def test_custom_cooldown(self, connection, clock):
        config = VaultConfig(url="http://vault.test:8200", auth_cooldown=30)
        api = VaultAPI(config=config, connection=connection, clock=clock)
        connection.issue("t-1")
        api.approle_login("role", "secret")
        connection.expire("t-1")
        clock.advance(10)
        with pytest.raises(CooldownActive):
            api.check_auth_needed()


class TestRelevanceCheck:

    def test_healthy_token_is_not_auth_related(self, api, connection, clock):
        connection.issue("t-1")
        api.approle_login("role", "secret")
        clock.advance(60)
        with pytest.raises(NotAuthRelated):
            api.check_auth_needed()
        assert len(connection.login_calls) == 1

    def test_min_ttl_is_independent_of_cooldown(self, connection, clock):
        config = VaultConfig(
            url="http://vault.test:8200", auth_cooldown=5, min_token_ttl=120
        )
        api = VaultAPI(config=config, connection=connection, clock=clock)
        connection.issue("t-1", "t-2")
        api.approle_login("role", "secret")
        connection.ttls["t-1"] = 60
        clock.advance(60)
        api.check_auth_needed()
        assert connection.token == "t-2"


class TestDispatchByMethod:

    def test_no_authentication_performed(self, api, clock):
        with pytest.raises(UnknownAuthMethod, match=r"\[none\]"):
            api.check_auth_needed()

    def test_replays_approle(self, api, connection, clock):
        connection.issue("t-1", "t-2")
        api.approle_login("role", "secret", auth_path="auth/apps")
        connection.expire("t-1")
        clock.advance(10)
        api.check_auth_needed()
        assert connection.login_calls[1] == (
            "auth/apps/login", {"role_id": "role", "secret_id": "secret"}
        )

    def test_replays_kubernetes(self, api, connection, clock):
        connection.issue("k-1", "k-2")
        api.kubernetes_login("jwt-value", "my-role")
        connection.expire("k-1")
        clock.advance(10)
        api.check_auth_needed()
        assert connection.login_calls[1] == (
            "auth/kubernetes/login", {"jwt": "jwt-value", "role": "my-role"}
        )
        assert connection.token == "k-2"

    def test_replays_ldap(self, api, connection, clock):
        connection.issue("l-1", "l-2")
        api.ldap_login("alice", "pw")
        connection.expire("l-1")
        clock.advance(10)
        api.check_auth_needed()
        assert connection.login_calls[1] == ("auth/ldap/login/alice", {"password": "pw"})
        assert connection.token == "l-2"

    def test_static_token_reports_success_without_login(self, api, connection, clock):
        api.set_token("static")
        clock.advance(10)
        api.check_auth_needed()
        assert connection.login_calls == []
        assert connection.token == "static"
        assert api.auth_cache.last_attempt == clock.now

    def test_failed_replay_raises_login_failed(self, api, connection, clock):
        connection.issue("l-1", InvalidRequest("ldap operation failed"))
        api.ldap_login("alice", "pw")
        connection.expire("l-1")
        clock.advance(10)
        with pytest.raises(LoginFailed):
            api.check_auth_needed()
        assert connection.token == "l-1"


class TestMethodSwitching:

    def test_approle_parameters_survive_ldap(self, api, connection, clock):
        connection.issue("t-1", "l-1", "t-2")
        api.approle_login("role-a", "secret-a")
        api.ldap_login("bob", "pw-b")

        approle = api.auth_cache.credentials_for(AuthMethod.APPROLE)
        api._dispatcher.replay(approle)

        assert connection.login_calls[-1] == (
            "auth/approle/login", {"role_id": "role-a", "secret_id": "secret-a"}
        )
        assert api.auth_method is AuthMethod.APPROLE
        assert connection.token == "t-2"

    def test_approle_mount_survives_ldap_through_init_approle(
        self, api, connection, clock, approle_files
    ):
        role_id_file, secret_id_file, token_file = approle_files
        connection.issue("t-1", "l-1", "t-2", "t-3")
        api.init_approle(
            str(role_id_file), str(secret_id_file), str(token_file), auth_path="auth/apps"
        )
        api.ldap_login("bob", "pw-b")
        token_file.unlink()
        api.init_approle(str(role_id_file), str(secret_id_file), str(token_file))
        assert connection.login_calls[-1][0] == "auth/apps/login"

        # recovery replays the same mount
        connection.expire("t-2")
        clock.advance(10)
        api.check_auth_needed()
        assert connection.login_calls[-1] == (
            "auth/apps/login", {"role_id": "role-id", "secret_id": "secret-id"}
        )
        assert connection.token == "t-3"

    def test_only_last_method_is_replayed(self, api, connection, clock):
        connection.issue("t-1", "l-1", "l-2")
        api.approle_login("role-a", "secret-a")
        api.ldap_login("bob", "pw-b")
        connection.expire("l-1")
        clock.advance(10)
        api.check_auth_needed()
        assert connection.login_calls[-1] == ("auth/ldap/login/bob", {"password": "pw-b"})
