"""Graph API user node."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import TYPE_CHECKING, Callable, List, Optional

from .config import get_settings
from .node import Node, list_connected
from .tasks import Cancellable, run_in_thread
from .transport import new_call

if TYPE_CHECKING:
    from .album import Album
    from .authorizer import Authorizer

logger = logging.getLogger(__name__)

ME_FUNCTION = "me"


class User(Node):
    """A Facebook user. Parent of Album."""

    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def get_me(cls, authorizer: "Authorizer") -> "User":
        """Fetch the user the authorizer's token belongs to.

        Raises:
            TransportFailure: On network or HTTP errors.
            ParseFailure: If the response is not a valid user object.
        """
        call = new_call(authorizer)
        call.set_function(ME_FUNCTION)
        call.set_method("GET")
        call.add_param("fields", get_settings().user_fields)
        call.send_sync()

        me = cls.from_payload(call.get_payload())
        logger.debug(f"Fetched current user {me.id}")
        return me

    @classmethod
    def get_me_async(
        cls,
        authorizer: "Authorizer",
        callback: Optional[Callable[[Future], None]] = None,
        cancellable: Optional[Cancellable] = None,
    ) -> Future:
        """Run get_me on a worker thread."""
        return run_in_thread(cls.get_me, authorizer, callback=callback, cancellable=cancellable)

    def get_albums(self, authorizer: "Authorizer") -> List["Album"]:
        """List the user's albums."""
        from .album import Album

        return list_connected(self, Album, authorizer)

    def get_albums_async(
        self,
        authorizer: "Authorizer",
        callback: Optional[Callable[[Future], None]] = None,
        cancellable: Optional[Cancellable] = None,
    ) -> Future:
        """Run get_albums on a worker thread."""
        return run_in_thread(self.get_albums, authorizer, callback=callback, cancellable=cancellable)


__all__ = ["User", "ME_FUNCTION"]
