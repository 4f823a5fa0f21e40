"""Typed client for the Facebook Graph API."""

from .album import Album
from .authorizer import AccountAuthorizer, Authorizer, OAuth2Account, SimpleAuthorizer
from .config import FACEBOOK_ENDPOINT, Settings, get_settings
from .connectable import Connectable
from .errors import (
    AuthorizationFailure,
    GraphError,
    NotConnectable,
    OperationCancelled,
    ParseFailure,
    RemoteError,
    TransportFailure,
)
from .node import Node, append_connected, fetch_by_id, list_connected
from .photo import Photo, PhotoImage
from .tasks import Cancellable, run_in_thread
from .transport import RestCall, RestProxy, new_call
from .user import User

__version__ = "0.1.0"

__all__ = [
    "Node",
    "User",
    "Album",
    "Photo",
    "PhotoImage",
    "Connectable",
    "fetch_by_id",
    "list_connected",
    "append_connected",
    "Authorizer",
    "SimpleAuthorizer",
    "AccountAuthorizer",
    "OAuth2Account",
    "RestProxy",
    "RestCall",
    "new_call",
    "Cancellable",
    "run_in_thread",
    "Settings",
    "get_settings",
    "FACEBOOK_ENDPOINT",
    "GraphError",
    "TransportFailure",
    "RemoteError",
    "ParseFailure",
    "NotConnectable",
    "AuthorizationFailure",
    "OperationCancelled",
]
