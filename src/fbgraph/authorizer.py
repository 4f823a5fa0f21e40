"""Authorization strategies for Graph API calls.

An authorizer stamps credentials onto outbound requests and, where the
credential source allows it, refreshes them. Authorizers are shared across
threads; each one guards its cached token with its own lock.
"""

from __future__ import annotations

import abc
import logging
import threading
from typing import TYPE_CHECKING, Optional, Protocol

import httpx

from .config import get_settings
from .errors import AuthorizationFailure, OperationCancelled

if TYPE_CHECKING:
    from .tasks import Cancellable
    from .transport import RestCall

logger = logging.getLogger(__name__)

ACCESS_TOKEN_PARAM = "access_token"


class Authorizer(abc.ABC):
    """Abstract base class for credential strategies."""

    @abc.abstractmethod
    def process_call(self, call: "RestCall") -> None:
        """Add credentials to a call in place."""
        pass

    @abc.abstractmethod
    def process_message(self, message: httpx.Request) -> None:
        """Add credentials to a raw HTTP request in place.

        Used for requests that bypass RestCall (e.g. photo downloads).
        """
        pass

    @abc.abstractmethod
    def refresh_authorization(self, cancellable: Optional["Cancellable"] = None) -> bool:
        """
        Replace the cached credential with a fresh one.
        Returns False if this strategy cannot refresh.
        Raises AuthorizationFailure if a refresh was attempted and failed.
        """
        pass


def _stamp_message(message: httpx.Request, token: str) -> None:
    message.url = message.url.copy_add_param(ACCESS_TOKEN_PARAM, token)


class SimpleAuthorizer(Authorizer):
    """Authorizes with a fixed access token."""

    def __init__(self, access_token: Optional[str] = None):
        """
        Args:
            access_token: Graph API token. If None, FBGRAPH_ACCESS_TOKEN is used.
        """
        token = access_token or get_settings().access_token
        if not token:
            raise AuthorizationFailure(
                "No access token configured. Set FBGRAPH_ACCESS_TOKEN or pass one explicitly."
            )
        self._lock = threading.Lock()
        self._access_token = token

    @property
    def access_token(self) -> str:
        with self._lock:
            return self._access_token

    @access_token.setter
    def access_token(self, value: str) -> None:
        with self._lock:
            self._access_token = value

    def process_call(self, call: "RestCall") -> None:
        with self._lock:
            call.add_param(ACCESS_TOKEN_PARAM, self._access_token)

    def process_message(self, message: httpx.Request) -> None:
        with self._lock:
            _stamp_message(message, self._access_token)

    def refresh_authorization(self, cancellable: Optional["Cancellable"] = None) -> bool:
        return False


class OAuth2Account(Protocol):
    """An external account provider able to hand out OAuth2 access tokens."""

    def ensure_credentials(self, cancellable: Optional["Cancellable"] = None) -> None:
        """Make sure the account's credentials are valid. Raises on failure."""
        ...

    def get_access_token(self, cancellable: Optional["Cancellable"] = None) -> str:
        """Return a current OAuth2 access token. Raises on failure."""
        ...


class AccountAuthorizer(Authorizer):
    """Authorizes with tokens obtained from a desktop OAuth2 account.

    No token is cached until refresh_authorization succeeds; until then
    calls go out without credentials.
    """

    def __init__(self, account: OAuth2Account):
        if account is None:
            raise ValueError("An OAuth2 account is required")
        self.account = account
        self._lock = threading.Lock()
        self._access_token: Optional[str] = None

    @property
    def access_token(self) -> Optional[str]:
        with self._lock:
            return self._access_token

    def process_call(self, call: "RestCall") -> None:
        with self._lock:
            if self._access_token is not None:
                call.add_param(ACCESS_TOKEN_PARAM, self._access_token)

    def process_message(self, message: httpx.Request) -> None:
        with self._lock:
            if self._access_token is not None:
                _stamp_message(message, self._access_token)

    def refresh_authorization(self, cancellable: Optional["Cancellable"] = None) -> bool:
        """Fetch a new token from the account provider.

        The cached token is cleared first and stays cleared if any step fails.

        Raises:
            OperationCancelled: If ``cancellable`` was signaled.
            AuthorizationFailure: If the provider could not supply a token.
        """
        with self._lock:
            self._access_token = None
            try:
                if cancellable is not None:
                    cancellable.raise_if_cancelled()
                self.account.ensure_credentials(cancellable)
                token = self.account.get_access_token(cancellable)
            except OperationCancelled:
                raise
            except Exception as e:
                logger.warning(f"Failed to refresh Graph authorization: {e}")
                raise AuthorizationFailure(f"Could not refresh access token: {e}") from e

            if not token:
                raise AuthorizationFailure("Account provider returned an empty access token")

            self._access_token = token
            logger.debug("Graph authorization refreshed")
            return True


__all__ = [
    "Authorizer",
    "SimpleAuthorizer",
    "AccountAuthorizer",
    "OAuth2Account",
    "ACCESS_TOKEN_PARAM",
]
