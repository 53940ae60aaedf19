from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from PIL import Image

from .errors import DecodingError, ImageLoadingError, NetworkError
from .infrastructure.cache import ImageCache
from .infrastructure.decoding import decode_image
from .infrastructure.network import FETCHER
from .state import Failed, Idle, Loaded, Loading, LoadState, NoURL

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Awaitable[bytes]]
Decode = Callable[[bytes], Image.Image]
Subscriber = Callable[[LoadState], None]


class LoadController:
    """Drives one image from ``Idle`` to ``Loaded``, ``Failed`` or ``NoURL``.

    State is only mutated on the asyncio loop that owns the controller:
    ``load()`` must be called from it, and the fetch task resumes on it before
    publishing. Fetching and decoding happen on worker threads.

    A ``load()`` issued while a fetch is already in flight is ignored.

    ``loop`` pins the owning loop up front, so ``load()`` can schedule the
    fetch before that loop is running. It must still be called from the
    loop's own thread; ``create_task`` is not thread-safe.
    """

    def __init__(
        self,
        url: Optional[str],
        cache: ImageCache,
        *,
        fetch: Optional[Fetch] = None,
        decode: Optional[Decode] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._url = url
        self._cache = cache
        self._fetch = fetch or FETCHER.fetch
        self._decode = decode or decode_image
        self._loop = loop
        self._state: LoadState = Idle()
        self._subscribers: List[Subscriber] = []
        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self._closed = False

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def cache(self) -> ImageCache:
        return self._cache

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` with every new state; returns an unsubscribe function."""

        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def load(self) -> None:
        if self._closed:
            logger.debug("Ignoring load() on closed controller for %s", self._url)
            return

        if self._url is None:
            self._publish(NoURL())
            return

        if isinstance(self._state, Loading):
            logger.debug("Load already in flight for %s", self._url)
            return

        cached = self._cache.get(self._url)
        if cached is not None:
            logger.debug("Cache hit for %s", self._url)
            self._publish(Loaded(cached))
            return

        logger.debug("Cache miss for %s", self._url)
        loop = self._loop or asyncio.get_running_loop()
        self._generation += 1
        self._publish(Loading())
        self._task = loop.create_task(self._run(self._url, self._generation))

    async def wait(self) -> LoadState:
        """Wait for the in-flight fetch, if any, and return the resulting state."""

        task = self._task
        if task is not None:
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self._state

    def close(self) -> None:
        """Detach from any in-flight fetch; its result will never be published."""

        self._closed = True
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        self._subscribers.clear()

    def __enter__(self) -> "LoadController":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"LoadController(url={self._url!r}, state={type(self._state).__name__})"

    async def _run(self, url: str, generation: int) -> None:
        try:
            image = await self._fetch_and_decode(url)
        except ImageLoadingError as exc:
            if generation != self._generation:
                return
            logger.warning("Failed to load %s: %s", url, exc)
            self._publish(Failed(exc))
            return

        if generation != self._generation:
            logger.debug("Discarding stale result for %s", url)
            return
        self._cache.set(url, image)
        self._publish(Loaded(image))

    async def _fetch_and_decode(self, url: str) -> Image.Image:
        try:
            data = await self._fetch(url)
        except ImageLoadingError:
            raise
        except Exception as exc:
            raise NetworkError(exc) from exc

        try:
            return await asyncio.to_thread(self._decode, data)
        except DecodingError:
            raise
        except Exception as exc:
            raise DecodingError(str(exc)) from exc

    def _publish(self, state: LoadState) -> None:
        self._state = state
        logger.debug("%s -> %s", self._url, type(state).__name__)
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("State subscriber failed for %s", self._url)
