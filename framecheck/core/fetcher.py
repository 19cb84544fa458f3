"""Retrieve a target's response headers and resolve its IP."""

import asyncio
import socket
from typing import Awaitable, Callable, Dict, Optional
from urllib.parse import urlsplit

import httpx

from framecheck.core.config import Config
from framecheck.core.models import FetchResult

Resolver = Callable[[str], Awaitable[str]]


class FetchError(Exception):
    """Header retrieval failed (network error or an error reply)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


async def resolve_ip(host: str) -> str:
    """First address *host* resolves to, or "-" if it does not resolve."""
    if not host:
        return "-"
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except OSError:
        return "-"
    for _family, _type, _proto, _canon, sockaddr in infos:
        if sockaddr:
            return str(sockaddr[0])
    return "-"


def _lower_headers(headers: httpx.Headers) -> Dict[str, str]:
    # Repeated headers are joined the way httpx joins them (", ").
    out: Dict[str, str] = {}
    for k in headers.keys():
        out[k.lower()] = ", ".join(headers.get_list(k))
    return out


class HeaderFetcher:
    """
    Fetches headers straight from the target with httpx.

    Usage:
        async with HeaderFetcher(config) as fetcher:
            result = await fetcher.fetch("https://example.com")
    """

    def __init__(self, config: Optional[Config] = None,
                 client: Optional[httpx.AsyncClient] = None,
                 resolver: Optional[Resolver] = None, logger=None):
        self.config = config or Config()
        self.logger = logger
        self.resolver = resolver or resolve_ip
        self._own_client = client is None
        self.client = client or httpx.AsyncClient(
            verify=False, proxy=self.config.proxy, follow_redirects=True,
            timeout=self.config.fetch_timeout,
            headers={"User-Agent": self.config.user_agent})

    async def fetch(self, url: str) -> FetchResult:
        try:
            resp = await self.client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(f"Request failed: {exc}") from exc

        if self.logger:
            self.logger.debug(f"← HTTP {resp.status_code} from {resp.url}")

        ip = await self.resolver(urlsplit(str(resp.url)).hostname or "")
        return FetchResult(headers=_lower_headers(resp.headers), ip=ip)

    async def aclose(self):
        if self._own_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()


class RemoteHeaderFetcher(HeaderFetcher):
    """
    Client of a check-headers service (see framecheck.service).

    POSTs ``{"url": ...}`` and expects ``{"headers": {...}, "ip": "..."}``;
    any non-2xx reply or ``{"error": ...}`` body is a FetchError.
    """

    def __init__(self, endpoint: str, config: Optional[Config] = None,
                 client: Optional[httpx.AsyncClient] = None, logger=None):
        super().__init__(config=config, client=client, logger=logger)
        self.endpoint = endpoint

    async def fetch(self, url: str) -> FetchResult:
        try:
            resp = await self.client.post(self.endpoint, json={"url": url})
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(f"Request failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400 or "error" in data:
            raise FetchError(str(data.get("error") or f"HTTP {resp.status_code}"))

        headers = data.get("headers") or {}
        if not isinstance(headers, dict):
            raise FetchError("Malformed reply from header service")
        return FetchResult(
            headers={str(k).lower(): str(v) for k, v in headers.items()},
            ip=str(data.get("ip") or "-"),
        )
