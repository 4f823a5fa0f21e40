"""Graph API photo node and its renditions."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Iterator, List, Mapping, Optional

import httpx
from pydantic import BaseModel, Field, PrivateAttr, field_validator

from . import transport
from .album import Album
from .connectable import Connectable
from .errors import TransportFailure
from .node import Node

if TYPE_CHECKING:
    from .authorizer import Authorizer

logger = logging.getLogger(__name__)


class PhotoImage(BaseModel):
    """One available size of a photo."""

    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    source: Optional[str] = None


class Photo(Node, Connectable):
    """A photo. Lives under an Album at ``/<album-id>/photos``.

    Attributes:
        name: Caption given by the user
        source: URL of the default size (at most 720px wide or high)
        width: Width of the default size
        height: Height of the default size
        images: Every available size, in server order
    """

    connections: ClassVar[Mapping[type, str]] = MappingProxyType({Album: "photos"})

    name: Optional[str] = None
    source: Optional[str] = None
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    images: List[PhotoImage] = Field(default_factory=list)

    _hires_image: Optional[PhotoImage] = PrivateAttr(default=None)

    @field_validator("images", mode="before")
    @classmethod
    def _images_must_be_array(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning(
                f"The 'images' node retrieved from the Graph API isn't an array, "
                f"it's holding a {type(value).__name__}"
            )
            raise ValueError("images must be a JSON array")
        return value

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name == "images":
            self._hires_image = None

    def __eq__(self, other: object) -> bool:
        # The cached hires rendition is not part of a photo's identity.
        if not isinstance(other, Photo):
            return NotImplemented
        return type(self) is type(other) and self.model_dump() == other.model_dump()

    def get_post_params(self, parent_kind: type) -> Dict[str, str]:
        # Binary upload of "source" (multipart) is not supported.
        return {"message": self.name or ""}

    @property
    def default_source(self) -> Optional[str]:
        return self.source

    @property
    def default_width(self) -> int:
        return self.width

    @property
    def default_height(self) -> int:
        return self.height

    def get_image_hires(self) -> Optional[PhotoImage]:
        """Widest rendition (first one on ties), or None if there are none.

        Cached until ``images`` is reassigned.
        """
        if self._hires_image is None and self.images:
            self._hires_image = max(self.images, key=lambda image: image.width)
        return self._hires_image

    def get_image_near_width(self, width: int) -> Optional[PhotoImage]:
        """Rendition whose width is closest to ``width`` (first one on ties)."""
        if not self.images:
            return None
        return min(self.images, key=lambda image: abs(image.width - width))

    def get_image_near_height(self, height: int) -> Optional[PhotoImage]:
        """Rendition whose height is closest to ``height`` (first one on ties)."""
        if not self.images:
            return None
        return min(self.images, key=lambda image: abs(image.height - height))

    def download_default_size(
        self, authorizer: "Authorizer", chunk_size: Optional[int] = None
    ) -> Iterator[bytes]:
        """Stream the default-size image from ``source``.

        The request is sent lazily when iteration starts and closed when the
        iterator is exhausted or closed.

        Raises:
            ValueError: If the photo has no source URL.
            TransportFailure: On network errors or a non-2xx status.
        """
        if not self.source:
            raise ValueError(f"Photo {self.id} has no source URL")

        request = httpx.Request("GET", self.source)
        authorizer.process_message(request)
        return _stream_response(transport.get_proxy(), request, chunk_size)


def _stream_response(
    proxy: transport.RestProxy, request: httpx.Request, chunk_size: Optional[int]
) -> Iterator[bytes]:
    try:
        with proxy.client() as client:
            response = client.send(request, stream=True)
            try:
                if not response.is_success:
                    response.read()
                    raise TransportFailure(
                        f"HTTP {response.status_code}: {response.text[:200]}",
                        status_code=response.status_code,
                    )
                yield from response.iter_bytes(chunk_size)
            finally:
                response.close()
    except httpx.HTTPError as e:
        raise TransportFailure(f"Download failed: {e}") from e


__all__ = ["Photo", "PhotoImage"]
