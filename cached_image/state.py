"""Load states published by :class:`~cached_image.controller.LoadController`.

The five kinds form a closed set; consumers should match on all of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from PIL import Image

from .errors import ImageLoadingError
from .infrastructure.decoding import encode_png


@dataclass(frozen=True)
class Idle:
    """No load attempted yet."""


@dataclass(frozen=True)
class Loading:
    """A fetch is in flight."""


@dataclass(frozen=True, eq=False)
class Loaded:
    image: Image.Image

    def __eq__(self, other: object) -> bool:
        # Images compare by their PNG encoding, not identity.
        if not isinstance(other, Loaded):
            return NotImplemented
        if self.image is other.image:
            return True
        return encode_png(self.image) == encode_png(other.image)

    def __hash__(self) -> int:
        return hash(encode_png(self.image))


@dataclass(frozen=True, eq=False)
class Failed:
    error: ImageLoadingError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Failed):
            return NotImplemented
        return True

    def __hash__(self) -> int:
        return hash(Failed)


@dataclass(frozen=True)
class NoURL:
    """No locator was supplied, so there is nothing to load or retry."""


LoadState = Union[Idle, Loading, Loaded, Failed, NoURL]

__all__ = ["Idle", "Loading", "Loaded", "Failed", "NoURL", "LoadState"]
