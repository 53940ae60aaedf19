"""Passive presentation of a :class:`LoadController`.

The view decides what to show purely from the controller's state. The
placeholder and error images are handed through untouched.
"""

from __future__ import annotations

from typing import Optional

from PIL import Image, ImageDraw

from .controller import Decode, Fetch, LoadController
from .infrastructure.cache import CACHE, ImageCache
from .state import Failed, Idle, Loaded, Loading, LoadState, NoURL


def default_placeholder(size: int = 64) -> Image.Image:
    img = Image.new("RGB", (size, size), (224, 228, 234))
    draw = ImageDraw.Draw(img)
    inset = size // 4
    draw.rectangle((inset, inset, size - inset, size - inset), outline=(148, 163, 184), width=2)
    return img


def default_error_image(size: int = 64) -> Image.Image:
    img = Image.new("RGB", (size, size), (254, 226, 226))
    draw = ImageDraw.Draw(img)
    inset = size // 4
    draw.line((inset, inset, size - inset, size - inset), fill=(220, 38, 38), width=3)
    draw.line((inset, size - inset, size - inset, inset), fill=(220, 38, 38), width=3)
    return img


class CachedImageView:
    def __init__(
        self,
        url: Optional[str],
        *,
        placeholder: Optional[Image.Image] = None,
        error_image: Optional[Image.Image] = None,
        cache: ImageCache = CACHE,
        fetch: Optional[Fetch] = None,
        decode: Optional[Decode] = None,
    ) -> None:
        self.placeholder = placeholder if placeholder is not None else default_placeholder()
        self.error_image = error_image if error_image is not None else default_error_image()
        self.controller = LoadController(url, cache, fetch=fetch, decode=decode)
        self._appeared = False

    @property
    def state(self) -> LoadState:
        return self.controller.state

    def on_appear(self) -> None:
        """Start loading the first time the view is shown."""

        if self._appeared:
            return
        self._appeared = True
        self.controller.load()

    def tap(self) -> None:
        """Retry after a failure; taps in any other state are ignored."""

        if isinstance(self.controller.state, Failed):
            self.controller.load()

    def render(self) -> Optional[Image.Image]:
        """Return the image to draw, or ``None`` while a progress indicator belongs there."""

        state = self.controller.state
        if isinstance(state, (Idle, Loading)):
            return None
        if isinstance(state, Loaded):
            return state.image
        if isinstance(state, Failed):
            return self.error_image
        if isinstance(state, NoURL):
            return self.placeholder
        raise TypeError(f"Unknown load state: {state!r}")

    def dispose(self) -> None:
        self.controller.close()
