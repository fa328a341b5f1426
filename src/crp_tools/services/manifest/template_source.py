"""Retrieval of the manifest .docx template."""

from __future__ import annotations

import logging
import threading
import time
from functools import lru_cache
from pathlib import Path

import httpx

from ...config import settings
from .errors import TemplateFetchError

logger = logging.getLogger(__name__)


class TemplateSource:
    """Fetches the manifest template and keeps it for a short while.

    The template does not change between requests, so one download is reused
    for ``cache_seconds``. There is no retry: a failed fetch fails the request.
    """

    def __init__(
        self,
        url: str | None = None,
        path: Path | None = None,
        timeout: float | None = None,
        cache_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.path = path if path is not None else settings.manifest_template_file
        self.url = url or settings.manifest_template_url
        if not self.path and not self.url:
            raise ValueError("Manifest template location is not configured.")
        self.timeout = timeout if timeout is not None else settings.manifest_template_timeout_seconds
        self.cache_seconds = (
            cache_seconds if cache_seconds is not None else settings.manifest_template_cache_seconds
        )
        self._transport = transport
        self._lock = threading.Lock()
        self._cached: bytes | None = None
        self._cached_at = 0.0

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            follow_redirects=True,
            transport=self._transport,
        )

    def fetch(self) -> bytes:
        with self._lock:
            if self._cached is not None and time.monotonic() - self._cached_at < self.cache_seconds:
                return self._cached

        # Download outside the lock.
        payload = self._read_file() if self.path else self._download()
        if self.cache_seconds > 0:
            with self._lock:
                self._cached = payload
                self._cached_at = time.monotonic()
        return payload

    def clear(self) -> None:
        with self._lock:
            self._cached = None
            self._cached_at = 0.0

    def _read_file(self) -> bytes:
        try:
            payload = self.path.read_bytes()
        except OSError as exc:
            raise TemplateFetchError(f"Manifest template not readable: {self.path}") from exc
        if not payload:
            raise TemplateFetchError(f"Manifest template is empty: {self.path}")
        return payload

    def _download(self) -> bytes:
        logger.info(f"Fetching manifest template from {self.url}")
        with self._get_client() as client:
            try:
                response = client.get(self.url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise TemplateFetchError(
                    f"Manifest template request returned HTTP {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                raise TemplateFetchError(f"Failed to fetch manifest template from {self.url}: {exc}") from exc
        if not response.content:
            raise TemplateFetchError("Manifest template response was empty.")
        return response.content

    def check_health(self) -> bool:
        if self.path:
            return self.path.is_file()
        with self._get_client() as client:
            try:
                response = client.head(self.url)
                return response.status_code < 400
            except httpx.HTTPError as exc:
                logger.warning(f"Manifest template health check failed: {exc}")
                return False


@lru_cache(maxsize=1)
def get_template_source() -> TemplateSource:
    """Process-wide template source built from settings."""
    return TemplateSource()
