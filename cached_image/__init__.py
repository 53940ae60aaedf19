"""Asynchronous, cached loading of remote images."""

from .config import APP_VERSION
from .controller import LoadController
from .errors import DecodingError, ImageLoadingError, NetworkError, UrlError
from .infrastructure import CACHE, DefaultImageCache, ImageCache
from .state import Failed, Idle, Loaded, Loading, LoadState, NoURL
from .view import CachedImageView

__version__ = APP_VERSION

__all__ = [
    "APP_VERSION",
    "__version__",
    "LoadController",
    "ImageLoadingError",
    "NetworkError",
    "DecodingError",
    "UrlError",
    "CACHE",
    "DefaultImageCache",
    "ImageCache",
    "Idle",
    "Loading",
    "Loaded",
    "Failed",
    "NoURL",
    "LoadState",
    "CachedImageView",
]
