"""Infrastructure helpers for caching, networking and decoding."""

from .cache import CACHE, DefaultImageCache, ImageCache, image_cost
from .decoding import decode_image, encode_png
from .network import FETCHER, ImageFetcher

__all__ = [
    "CACHE",
    "DefaultImageCache",
    "ImageCache",
    "image_cost",
    "decode_image",
    "encode_png",
    "FETCHER",
    "ImageFetcher",
]
