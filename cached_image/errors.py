"""Failure causes carried by the ``Failed`` load state."""

from __future__ import annotations


class ImageLoadingError(Exception):
    """Base class for every reason an image could not be loaded."""


class UrlError(ImageLoadingError):
    """Reserved: the locator itself was unusable.

    Kept for parity with the published error kinds; nothing in the load path
    raises it.
    """


class DecodingError(ImageLoadingError):
    """The payload was fetched but is not a recognizable image."""


class NetworkError(ImageLoadingError):
    """The transport failed before a payload was received."""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(str(cause) if cause is not None else "network error")
        self.cause = cause
