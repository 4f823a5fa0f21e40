"""Tests for authorization strategies."""

import threading
from unittest.mock import Mock

import httpx
import pytest

from fbgraph import config as config_module
from fbgraph.authorizer import AccountAuthorizer, OAuth2Account, SimpleAuthorizer
from fbgraph.errors import AuthorizationFailure, OperationCancelled
from fbgraph.tasks import Cancellable
from fbgraph.transport import new_call


@pytest.fixture
def account():
    """Account provider handing out T1, T2, ... on successive refreshes."""
    provider = Mock(spec=OAuth2Account)
    provider.get_access_token.side_effect = ["T1", "T2", "T3"]
    return provider


class TestSimpleAuthorizer:
    def test_process_call_adds_token(self):
        call = new_call(SimpleAuthorizer("abc"))
        assert ("access_token", "abc") in call.params

    def test_process_message_appends_token_to_query(self):
        request = httpx.Request("GET", "https://scontent.example/p.jpg?size=large")

        SimpleAuthorizer("abc").process_message(request)

        assert request.url.params["size"] == "large"
        assert request.url.params["access_token"] == "abc"

    def test_refresh_is_not_possible(self):
        assert SimpleAuthorizer("abc").refresh_authorization() is False

    def test_token_from_settings(self, monkeypatch):
        monkeypatch.setenv("FBGRAPH_ACCESS_TOKEN", "from-env")
        config_module.reload_settings()

        assert SimpleAuthorizer().access_token == "from-env"

    def test_missing_token_raises(self):
        with pytest.raises(AuthorizationFailure, match="No access token configured"):
            SimpleAuthorizer()

    def test_token_update_applies_to_next_call(self):
        auth = SimpleAuthorizer("old")
        auth.access_token = "new"

        assert new_call(auth).get_param("access_token") == "new"

    def test_shared_across_threads(self):
        auth = SimpleAuthorizer("shared")
        calls = []

        def worker():
            for _ in range(50):
                calls.append(new_call(auth))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 200
        assert all(call.params == [("access_token", "shared")] for call in calls)


class TestAccountAuthorizer:
    def test_no_token_before_refresh(self, account):
        auth = AccountAuthorizer(account)

        assert auth.access_token is None
        assert new_call(auth).params == []

        request = httpx.Request("GET", "https://scontent.example/p.jpg")
        auth.process_message(request)
        assert "access_token" not in request.url.params

    def test_successive_refreshes_use_latest_token(self, account):
        auth = AccountAuthorizer(account)

        assert auth.refresh_authorization() is True
        assert auth.refresh_authorization() is True

        assert new_call(auth).params == [("access_token", "T2")]
        assert account.ensure_credentials.call_count == 2

    def test_ensure_credentials_failure_clears_token(self, account):
        auth = AccountAuthorizer(account)
        auth.refresh_authorization()
        account.ensure_credentials.side_effect = RuntimeError("account locked")

        with pytest.raises(AuthorizationFailure, match="account locked") as exc_info:
            auth.refresh_authorization()

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert auth.access_token is None
        assert new_call(auth).get_param("access_token") is None

    def test_get_access_token_failure_clears_token(self, account):
        auth = AccountAuthorizer(account)
        auth.refresh_authorization()
        account.get_access_token.side_effect = RuntimeError("token endpoint down")

        with pytest.raises(AuthorizationFailure):
            auth.refresh_authorization()

        assert auth.access_token is None

    def test_empty_token_is_a_failure(self, account):
        account.get_access_token.side_effect = [""]
        auth = AccountAuthorizer(account)

        with pytest.raises(AuthorizationFailure, match="empty access token"):
            auth.refresh_authorization()

    def test_cancelled_refresh_skips_provider(self, account):
        auth = AccountAuthorizer(account)
        cancellable = Cancellable()
        cancellable.cancel()

        with pytest.raises(OperationCancelled):
            auth.refresh_authorization(cancellable)

        account.ensure_credentials.assert_not_called()

    def test_cancellable_is_passed_to_provider(self, account):
        auth = AccountAuthorizer(account)
        cancellable = Cancellable()

        auth.refresh_authorization(cancellable)

        account.ensure_credentials.assert_called_once_with(cancellable)
        account.get_access_token.assert_called_once_with(cancellable)

    def test_requires_account(self):
        with pytest.raises(ValueError):
            AccountAuthorizer(None)
