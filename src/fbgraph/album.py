"""Graph API album node."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar, Dict, List, Mapping, Optional

from pydantic import Field

from .connectable import Connectable
from .node import Node, list_connected
from .user import User

if TYPE_CHECKING:
    from .authorizer import Authorizer
    from .photo import Photo


class Album(Node, Connectable):
    """A photo album. Lives under a User at ``/<user-id>/albums``."""

    connections: ClassVar[Mapping[type, str]] = MappingProxyType({User: "albums"})

    name: Optional[str] = None
    description: Optional[str] = None
    cover_photo: Optional[str] = None  # ID of a Photo
    count: int = Field(default=0, ge=0)

    def get_post_params(self, parent_kind: type) -> Dict[str, str]:
        # TODO: send "privacy" once album visibility can be set by callers
        params = {"name": self.name or ""}
        if self.description:
            params["message"] = self.description
        return params

    def get_photos(self, authorizer: "Authorizer") -> List["Photo"]:
        """List the photos in this album."""
        from .photo import Photo

        return list_connected(self, Photo, authorizer)


__all__ = ["Album"]
