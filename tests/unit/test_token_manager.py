"""
Unit tests for TokenManager.

Tests the five-minute refresh margin, the token exchange request, refresh
token rotation, expiry calculation, and failure reporting with respx HTTP
mocking.
"""

import base64
from datetime import timedelta
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from qbo_query.core.credential_store import InMemoryCredentialStore
from qbo_query.core.token_manager import TokenManager
from qbo_query.exceptions import AuthError, ConfigurationError, NetworkError
from qbo_query.models.credentials import Credentials
from tests.helpers import FIXED_NOW, REALM_ID, TOKEN_URL, FrozenClock


def _token_response(**overrides: object) -> httpx.Response:
    payload = {
        "access_token": "new-access",
        "refresh_token": "refresh-2",
        "expires_in": 3600,
        "token_type": "bearer",
    }
    payload.update(overrides)
    return httpx.Response(200, json={k: v for k, v in payload.items() if v is not None})


def _manager(
    credentials: Credentials, clock: FrozenClock
) -> tuple[TokenManager, InMemoryCredentialStore]:
    store = InMemoryCredentialStore(credentials)
    return TokenManager(store, token_url=TOKEN_URL, clock=clock), store


class TestCachedToken:
    """Test reuse of a cached access token."""

    def test_valid_token_needs_no_request(
        self, valid_credentials: Credentials, clock: FrozenClock
    ) -> None:
        """A token with more than five minutes left is returned as-is."""
        manager, store = _manager(valid_credentials, clock)

        with respx.mock(assert_all_called=False) as router:
            route = router.post(TOKEN_URL).mock(return_value=_token_response())
            assert manager.get_valid_access_token() == ("cached-access", REALM_ID)
            assert route.call_count == 0

        assert store.save_count == 0

    @respx.mock
    def test_token_at_margin_is_refreshed(
        self, valid_credentials: Credentials, clock: FrozenClock
    ) -> None:
        """Exactly five minutes left counts as expiring."""
        route = respx.post(TOKEN_URL).mock(return_value=_token_response())
        clock.advance(minutes=55)
        manager, _ = _manager(valid_credentials, clock)

        assert manager.get_valid_access_token() == ("new-access", REALM_ID)
        assert route.call_count == 1

    def test_token_just_outside_margin_is_reused(
        self, valid_credentials: Credentials, clock: FrozenClock
    ) -> None:
        clock.advance(minutes=54, seconds=59)
        manager, _ = _manager(valid_credentials, clock)

        with respx.mock(assert_all_called=False) as router:
            route = router.post(TOKEN_URL).mock(return_value=_token_response())
            assert manager.get_valid_access_token()[0] == "cached-access"
            assert route.call_count == 0

    @respx.mock
    def test_expired_token_is_refreshed(
        self, valid_credentials: Credentials, clock: FrozenClock
    ) -> None:
        route = respx.post(TOKEN_URL).mock(return_value=_token_response())
        clock.advance(hours=2)
        manager, _ = _manager(valid_credentials, clock)

        assert manager.get_valid_access_token()[0] == "new-access"
        assert route.call_count == 1

    @respx.mock
    def test_absent_token_is_refreshed(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        route = respx.post(TOKEN_URL).mock(return_value=_token_response())
        manager, store = _manager(base_credentials, clock)

        assert manager.get_valid_access_token()[0] == "new-access"
        assert route.call_count == 1
        assert store.save_count == 1

    @respx.mock
    def test_second_call_reuses_refreshed_token(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        route = respx.post(TOKEN_URL).mock(return_value=_token_response())
        manager, _ = _manager(base_credentials, clock)

        manager.get_valid_access_token()
        manager.get_valid_access_token()

        assert route.call_count == 1

    def test_missing_credentials_propagate(self, clock: FrozenClock) -> None:
        manager = TokenManager(InMemoryCredentialStore(), token_url=TOKEN_URL, clock=clock)

        with pytest.raises(ConfigurationError):
            manager.get_valid_access_token()


class TestRefreshRequest:
    """Test the token exchange request."""

    @respx.mock
    def test_sends_basic_auth_and_form_body(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        route = respx.post(TOKEN_URL).mock(return_value=_token_response())
        manager, _ = _manager(base_credentials, clock)

        manager.refresh()

        request = route.calls.last.request
        expected = base64.b64encode(b"client-abc:secret-xyz").decode("ascii")
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.headers["Accept"] == "application/json"
        assert parse_qs(request.content.decode("utf-8")) == {
            "grant_type": ["refresh_token"],
            "refresh_token": ["refresh-1"],
        }


class TestRefreshResult:
    """Test how the token response updates and persists credentials."""

    @respx.mock
    def test_expiry_is_now_plus_expires_in(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        respx.post(TOKEN_URL).mock(return_value=_token_response(expires_in=1800))
        manager, store = _manager(base_credentials, clock)

        updated = manager.refresh()

        assert updated.token_expiry == FIXED_NOW + timedelta(seconds=1800)
        assert store.load().token_expiry == FIXED_NOW + timedelta(seconds=1800)

    @respx.mock
    def test_missing_expires_in_defaults_to_one_hour(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        respx.post(TOKEN_URL).mock(return_value=_token_response(expires_in=None))
        manager, _ = _manager(base_credentials, clock)

        assert manager.refresh().token_expiry == FIXED_NOW + timedelta(hours=1)

    @respx.mock
    def test_rotated_refresh_token_is_stored(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        respx.post(TOKEN_URL).mock(return_value=_token_response())
        manager, store = _manager(base_credentials, clock)

        manager.refresh()

        saved = store.load()
        assert saved.refresh_token == "refresh-2"
        assert saved.access_token == "new-access"

    @respx.mock
    def test_refresh_token_kept_when_not_rotated(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        respx.post(TOKEN_URL).mock(return_value=_token_response(refresh_token=None))
        manager, store = _manager(base_credentials, clock)

        manager.refresh()

        assert store.load().refresh_token == "refresh-1"

    @respx.mock
    def test_unknown_fields_survive_refresh(self, clock: FrozenClock) -> None:
        creds = Credentials(
            client_id="c", client_secret="s", realm_id="r", refresh_token="t", note="keep"
        )
        respx.post(TOKEN_URL).mock(return_value=_token_response())
        manager, store = _manager(creds, clock)

        manager.refresh()

        assert store.load().to_storage_dict()["note"] == "keep"


class TestRefreshFailures:
    """Test error reporting for failed exchanges."""

    @respx.mock
    def test_rejected_refresh_raises_auth_error(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        respx.post(TOKEN_URL).mock(
            return_value=httpx.Response(400, text='{"error":"invalid_grant"}')
        )
        manager, store = _manager(base_credentials, clock)

        with pytest.raises(AuthError) as exc_info:
            manager.refresh()

        message = str(exc_info.value)
        assert "400" in message
        assert "invalid_grant" in message
        assert store.save_count == 0

    @respx.mock
    def test_response_without_access_token(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        respx.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"refresh_token": "rt", "expires_in": 3600})
        )
        manager, store = _manager(base_credentials, clock)

        with pytest.raises(AuthError, match="missing access_token"):
            manager.refresh()

        assert store.save_count == 0

    @respx.mock
    def test_non_json_response(self, base_credentials: Credentials, clock: FrozenClock) -> None:
        respx.post(TOKEN_URL).mock(return_value=httpx.Response(200, text="<html>"))
        manager, _ = _manager(base_credentials, clock)

        with pytest.raises(AuthError, match="invalid JSON"):
            manager.refresh()

    @respx.mock
    def test_transport_failure_raises_network_error(
        self, base_credentials: Credentials, clock: FrozenClock
    ) -> None:
        respx.post(TOKEN_URL).mock(side_effect=httpx.ConnectError("connection refused"))
        manager, _ = _manager(base_credentials, clock)

        with pytest.raises(NetworkError):
            manager.refresh()

    @pytest.mark.parametrize("expires_in", ["soon", {"seconds": 60}, [3600]])
    @respx.mock
    def test_malformed_expires_in_raises_auth_error(
        self, base_credentials: Credentials, clock: FrozenClock, expires_in: object
    ) -> None:
        respx.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "a", "expires_in": expires_in})
        )
        manager, store = _manager(base_credentials, clock)

        with pytest.raises(AuthError, match="invalid expires_in"):
            manager.refresh()

        assert store.save_count == 0
