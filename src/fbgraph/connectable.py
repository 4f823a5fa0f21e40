"""Connectable capability: which parents a node kind can hang from.

A connectable kind declares a ``connections`` table mapping each valid
parent kind to the URL path segment of that connection, e.g.
``{User: "albums"}`` for albums. The table lives on the class; no instance
is needed to query it.
"""

from __future__ import annotations

import abc
import json
import logging
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional

from .errors import NotConnectable, ParseFailure

logger = logging.getLogger(__name__)


def load_json_object(payload: Optional[bytes | str]) -> Dict[str, Any]:
    """Parse a response payload that must hold a JSON object."""
    if payload is None:
        raise ParseFailure("Empty response payload")
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseFailure(f"Malformed JSON payload: {e}") from e
    if not isinstance(data, dict):
        raise ParseFailure(f"Expected a JSON object, got {type(data).__name__}")
    return data


class Connectable(abc.ABC):
    """Mixin for node kinds that can be listed under or appended to a parent."""

    connections: ClassVar[Mapping[type, str]] = MappingProxyType({})

    @classmethod
    def _lookup(cls, parent_kind: type) -> Optional[str]:
        # Subclasses of a declared parent kind are accepted too.
        for kind in getattr(parent_kind, "__mro__", (parent_kind,)):
            if kind in cls.connections:
                return cls.connections[kind]
        return None

    @classmethod
    def is_connectable_to(cls, parent_kind: type) -> bool:
        return cls._lookup(parent_kind) is not None

    @classmethod
    def get_connection_path(cls, parent_kind: type) -> str:
        """Path segment for the connection from ``parent_kind`` to this kind.

        Raises:
            NotConnectable: If ``parent_kind`` is not a declared parent.
        """
        path = cls._lookup(parent_kind)
        if path is None:
            raise NotConnectable(cls, parent_kind)
        return path

    @abc.abstractmethod
    def get_post_params(self, parent_kind: type) -> Dict[str, str]:
        """Form parameters to POST when appending this node to a parent.

        Never includes the access token; the authorizer adds it.
        """
        ...

    @classmethod
    def parse_connected_data(cls, payload: Optional[bytes | str]) -> List[Any]:
        """Decode a list-connected response into nodes of this kind.

        The payload is ``{"data": [ {...}, ... ]}``. Either every element
        decodes or ParseFailure is raised; partial lists are never returned.
        """
        envelope = load_json_object(payload)
        items = envelope.get("data")
        if not isinstance(items, list):
            raise ParseFailure(f"Connection payload for {cls.__name__} has no 'data' array")

        nodes = [cls.from_json_object(item) for item in items]  # type: ignore[attr-defined]
        logger.debug(f"Parsed {len(nodes)} {cls.__name__} node(s)")
        return nodes


__all__ = ["Connectable", "load_json_object"]
