"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest

from chromecastbg.api import ChromecastAPI
from chromecastbg.config import ChromecastConfig

from .helpers import make_jpeg

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def api_factory() -> Iterator[Callable[[Handler], ChromecastAPI]]:
    """Build ChromecastAPI instances backed by an ``httpx.MockTransport`` handler."""
    created: list[ChromecastAPI] = []

    def _factory(handler: Handler) -> ChromecastAPI:
        api = ChromecastAPI(ChromecastConfig(), transport=httpx.MockTransport(handler))
        created.append(api)
        return api

    yield _factory
    for api in created:
        api.close()
