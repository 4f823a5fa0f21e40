"""Graph node base model and the generic node/connection operations.

Every addressable entity of the Graph API is a node with a string ID.
Concrete kinds (User, Album, Photo) subclass Node; kinds that can be
listed under or appended to a parent also mix in Connectable.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from .connectable import Connectable, load_json_object
from .errors import NotConnectable, ParseFailure
from .tasks import Cancellable, run_in_thread
from .transport import new_call

if TYPE_CHECKING:
    from .authorizer import Authorizer

logger = logging.getLogger(__name__)

N = TypeVar("N", bound="Node")


class Node(BaseModel):
    """A Graph API node.

    Attributes:
        id: Identifier assigned by the Graph API; empty until fetched or appended
        link: URL of the node on Facebook
        created_time: ISO 8601 date the node was published
        updated_time: ISO 8601 date the node was last updated
    """

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    link: Optional[str] = None
    created_time: Optional[str] = None
    updated_time: Optional[str] = None

    # ------------------------------------------------------------------
    # JSON codec
    # ------------------------------------------------------------------

    @classmethod
    def from_json_object(cls: Type[N], data: Any) -> N:
        """Build a node of this kind from a decoded JSON object.

        Raises:
            ParseFailure: If ``data`` is not an object or fails validation.
        """
        if not isinstance(data, dict):
            raise ParseFailure(f"Expected a JSON object for {cls.__name__}, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ParseFailure(
                f"Invalid {cls.__name__} payload: {e.error_count()} error(s)",
                detail={"errors": e.errors(include_url=False)},
            ) from e

    @classmethod
    def from_payload(cls: Type[N], payload: Optional[bytes | str]) -> N:
        """Build a node of this kind from a raw response body."""
        return cls.from_json_object(load_json_object(payload))

    def to_json_object(self) -> Dict[str, Any]:
        """Serialize using Graph API field names, omitting unset attributes."""
        return self.model_dump(mode="json", exclude_none=True)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def set_id(self, node_id: str) -> None:
        """Assign the server ID (used after a successful append)."""
        if node_id is None:
            raise ValueError("Node ID cannot be None")
        self.id = node_id

    # ------------------------------------------------------------------
    # Graph operations
    # ------------------------------------------------------------------

    @classmethod
    def from_id(cls: Type[N], authorizer: "Authorizer", node_id: str) -> N:
        """Fetch the node with ``node_id`` as an instance of this kind."""
        return fetch_by_id(authorizer, node_id, cls)

    def get_connection_nodes(self, node_kind: Type[N], authorizer: "Authorizer") -> List[N]:
        """List nodes of ``node_kind`` connected to this node."""
        return list_connected(self, node_kind, authorizer)

    def get_connection_nodes_async(
        self,
        node_kind: Type[N],
        authorizer: "Authorizer",
        callback: Optional[Callable[[Future], None]] = None,
        cancellable: Optional[Cancellable] = None,
    ) -> Future:
        """Run get_connection_nodes on a worker thread."""
        return run_in_thread(
            list_connected,
            self,
            node_kind,
            authorizer,
            callback=callback,
            cancellable=cancellable,
        )

    def append_connection(self, node: "Node", authorizer: "Authorizer") -> bool:
        """Create ``node`` on the Graph API under this node."""
        return append_connected(self, node, authorizer)


def fetch_by_id(authorizer: "Authorizer", node_id: str, node_kind: Type[N]) -> N:
    """Fetch a single node by ID.

    Args:
        authorizer: Authorizer for the call.
        node_id: Graph ID; must be non-empty.
        node_kind: Node subclass to decode the response into.

    Returns:
        The populated node.

    Raises:
        TransportFailure: On network or HTTP errors.
        ParseFailure: If the response is not a valid node object.
    """
    if not node_id:
        raise ValueError("Node ID must be a non-empty string")
    if not (isinstance(node_kind, type) and issubclass(node_kind, Node)):
        raise TypeError(f"{node_kind!r} is not a Node kind")

    call = new_call(authorizer)
    call.set_method("GET")
    call.set_function(node_id)
    call.send_sync()

    return node_kind.from_payload(call.get_payload())


def list_connected(parent: Node, node_kind: Type[N], authorizer: "Authorizer") -> List[N]:
    """List the ``node_kind`` nodes connected to ``parent``.

    Issues ``GET /<parent.id>/<segment>`` where the segment comes from the
    child kind's connection table.

    Raises:
        NotConnectable: Before any I/O, if the kinds can't be connected.
        TransportFailure: On network or HTTP errors.
        ParseFailure: If any element of the response fails to decode.
    """
    if not (isinstance(node_kind, type) and issubclass(node_kind, Connectable)):
        raise NotConnectable(node_kind)
    path = node_kind.get_connection_path(type(parent))

    call = new_call(authorizer)
    call.set_method("GET")
    call.set_function(f"{parent.id}/{path}")
    call.send_sync()

    return node_kind.parse_connected_data(call.get_payload())


def append_connected(parent: Node, node: Node, authorizer: "Authorizer") -> bool:
    """Create ``node`` under ``parent`` and store the assigned ID on it.

    Issues ``POST /<parent.id>/<segment>`` with the node's post params.

    Returns:
        True on success.

    Raises:
        NotConnectable: Before any I/O, if the kinds can't be connected.
        TransportFailure: On network or HTTP errors.
        ParseFailure: If the response doesn't carry a string ID.
    """
    if not isinstance(node, Connectable):
        raise NotConnectable(type(node))
    parent_kind = type(parent)
    path = node.get_connection_path(parent_kind)

    call = new_call(authorizer)
    call.set_method("POST")
    call.set_function(f"{parent.id}/{path}")
    for key, value in node.get_post_params(parent_kind).items():
        call.add_param(key, value)
    call.send_sync()

    response = load_json_object(call.get_payload())
    new_id = next(iter(response.values()), None)
    if not isinstance(new_id, str):
        raise ParseFailure(f"Append response did not contain a string ID: {response!r}")

    node.set_id(new_id)
    logger.info(f"Appended {type(node).__name__} {new_id} to {parent_kind.__name__} {parent.id}")
    return True


__all__ = ["Node", "fetch_by_id", "list_connected", "append_connected"]
