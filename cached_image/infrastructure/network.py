from __future__ import annotations

import asyncio
from typing import Callable

import requests

from ..config import SETTINGS
from ..errors import NetworkError


SessionFactory = Callable[[], requests.Session]


class ImageFetcher:
    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        timeout: float | None = None,
    ) -> None:
        self._session_factory = session_factory or requests.Session
        self._timeout = SETTINGS.timeout if timeout is None else timeout
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": SETTINGS.user_agent})
        return session

    def fetch_bytes(self, url: str) -> bytes:
        """GET ``url`` and return the body, raising ``NetworkError`` on any transport failure."""

        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkError(exc) from exc
        return response.content

    async def fetch(self, url: str) -> bytes:
        return await asyncio.to_thread(self.fetch_bytes, url)

    def close(self) -> None:
        self._session.close()


FETCHER = ImageFetcher()
