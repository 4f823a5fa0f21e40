"""Error types raised by the Graph client."""

from __future__ import annotations

from typing import Any, Dict, Optional


class GraphError(Exception):
    """Base class for every error surfaced by fbgraph."""

    def __init__(
        self,
        error: str,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.message = message
        self.detail = detail or {}


class TransportFailure(GraphError):
    """Network failure or non-2xx response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__("transport_failure", message, detail=detail)
        self.status_code = status_code


class RemoteError(TransportFailure):
    """The Graph API answered with an error envelope."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error_type: Optional[str] = None,
        code: Optional[int] = None,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, detail=detail)
        self.error = "remote_error"
        self.error_type = error_type
        self.code = code


class ParseFailure(GraphError):
    """Payload was not valid JSON or did not have the expected shape."""

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("parse_failure", message, detail=detail)


def _kind_name(kind: Any) -> str:
    return getattr(kind, "__name__", None) or type(kind).__name__


class NotConnectable(GraphError):
    """A node kind cannot be connected to the requested parent kind."""

    def __init__(self, node_kind: type, parent_kind: Optional[type] = None) -> None:
        if parent_kind is None:
            error = "no_connectable"
            message = (
                f"The given node type ({_kind_name(node_kind)}) doesn't implement "
                "the connectable interface"
            )
        else:
            error = "not_connectable_to"
            message = (
                f"The given node type ({_kind_name(node_kind)}) can't connect "
                f"with a {_kind_name(parent_kind)} node"
            )
        super().__init__(error, message)
        self.node_kind = node_kind
        self.parent_kind = parent_kind


class AuthorizationFailure(GraphError):
    """No usable access token could be obtained."""

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("authorization_failure", message, detail=detail)


class OperationCancelled(GraphError):
    """An asynchronous operation was cancelled before it completed."""

    def __init__(self, message: str = "Operation was cancelled") -> None:
        super().__init__("cancelled", message)


__all__ = [
    "GraphError",
    "TransportFailure",
    "RemoteError",
    "ParseFailure",
    "NotConnectable",
    "AuthorizationFailure",
    "OperationCancelled",
]
