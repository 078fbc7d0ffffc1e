"""Batched JSON data source using httpx.

Concurrent fetches of the same resolved URL share a single request; the
decoded document is then narrowed with an expression path.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.request import url2pathname

import httpx

from pyqt_datalist.core import get_value_for_expr
from pyqt_datalist.protocols import get_list_config

logger = logging.getLogger(__name__)


class BatchedJsonSource:
    """
    Default DataSource implementation.

    Usage:
        source = BatchedJsonSource()
        items = await source.fetch_items(context, host, "items")
        await source.aclose()

    The host supplies the URL through ``host.src()``; relative values are
    resolved against ``context.resolve_url``. ``file:`` URLs are read from
    disk, everything else goes through an ``httpx.AsyncClient``.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._owns_client = client is None
        self._inflight: Dict[str, asyncio.Future] = {}

    async def fetch_items(self, context, host, expression_path: str) -> Any:
        src = host.src()
        if not src:
            raise ValueError(f"{type(host).__name__} has no src to fetch")
        url = context.resolve_url(src) if context is not None else src
        data = await self.fetch_json(url)
        return get_value_for_expr(data, expression_path)

    async def fetch_json(self, url: str) -> Any:
        """Fetch and decode url, joining any identical request in flight."""
        future = self._inflight.get(url)
        if future is None:
            future = asyncio.ensure_future(self._load(url))
            self._inflight[url] = future

            def _forget(done, url=url):
                if self._inflight.get(url) is done:
                    del self._inflight[url]

            future.add_done_callback(_forget)
        else:
            logger.debug(f"BatchedJsonSource: joining in-flight request for {url}")
        return await future

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            config = get_list_config()
            self._client = httpx.AsyncClient(
                headers={"User-Agent": config.user_agent},
                timeout=config.fetch_timeout_s,
            )
        return self._client

    async def _load(self, url: str) -> Any:
        parsed = httpx.URL(url)
        if parsed.scheme == "file":
            path = Path(url2pathname(parsed.path))
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return json.loads(text)
        return await self._get(url)

    async def _get(self, url: str) -> Any:
        config = get_list_config()
        client = self._get_client()
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = await client.get(url)
                resp.raise_for_status()
                return resp.json()
            except httpx.HTTPError as e:
                if attempt > config.fetch_retries:
                    raise
                delay = config.fetch_backoff_s * (2 ** (attempt - 1))
                logger.debug(f"BatchedJsonSource: attempt {attempt} for {url} failed ({e}), "
                             f"retrying in {delay:.2f}s")
                await asyncio.sleep(delay)
