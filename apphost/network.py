"""Outbound network configuration - $HTTP_PROXY / $HTTPS_PROXY support.

This has nothing to do with proxying plugin routes. It decides which proxy,
if any, outbound requests made by the host and its plugins go through:

- If $HTTP_PROXY is set, it is used for both HTTP and HTTPS requests.
- If $HTTPS_PROXY is set, it is used for both HTTP and HTTPS requests.
- If both are set, $HTTP_PROXY is used for HTTP requests (the proxy can
  cache responses) and $HTTPS_PROXY for HTTPS requests.

Lowercase variants are honoured when the uppercase ones are unset. The
config is built once at startup and passed to whatever makes outbound calls.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

import aiohttp

logger = logging.getLogger(__name__)


def redact_proxy_url(url: str) -> str:
    """Drop any user:password@ part of a proxy URL so it can be logged."""
    parts = urlsplit(url)
    if "@" not in parts.netloc:
        return url
    netloc = parts.hostname or ""
    if ":" in netloc:
        netloc = f"[{netloc}]"
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    return parts._replace(netloc=netloc).geturl()


@dataclass(frozen=True)
class NetworkConfig:
    """Proxy settings for outbound HTTP and HTTPS requests."""

    http_proxy: Optional[str] = None
    https_proxy: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "NetworkConfig":
        """Build the config from proxy environment variables."""
        env = os.environ if environ is None else environ
        http_proxy = env.get("HTTP_PROXY") or env.get("http_proxy") or None
        https_proxy = env.get("HTTPS_PROXY") or env.get("https_proxy") or None

        if http_proxy:
            logger.debug(f"using $HTTP_PROXY {redact_proxy_url(http_proxy)}")
        if https_proxy:
            logger.debug(f"using $HTTPS_PROXY {redact_proxy_url(https_proxy)}")

        return cls(http_proxy=http_proxy, https_proxy=https_proxy)

    @property
    def http_agent_proxy(self) -> Optional[str]:
        """Proxy used for plain HTTP requests."""
        return self.http_proxy or self.https_proxy

    @property
    def https_agent_proxy(self) -> Optional[str]:
        """Proxy used for HTTPS requests."""
        return self.https_proxy or self.http_proxy

    def proxy_for(self, url: str) -> Optional[str]:
        """Return the proxy URL for an outbound request to ``url``."""
        scheme = urlsplit(url).scheme.lower()
        if scheme == "https":
            return self.https_agent_proxy
        return self.http_agent_proxy


class OutboundClient:
    """aiohttp client session that routes requests through the configured proxy.

    Usage:
        async with OutboundClient(network) as client:
            data = await client.get_json("https://example.com/api")
    """

    def __init__(self, network: NetworkConfig, timeout: float = 30.0):
        self.network = network
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "OutboundClient":
        self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("OutboundClient is not open; use 'async with'")
        return self._session

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET ``url`` and decode the JSON body. Raises on non-2xx status."""
        async with self.session.get(url, proxy=self.network.proxy_for(url), **kwargs) as response:
            response.raise_for_status()
            return await response.json()

    async def post_json(self, url: str, data: Any, **kwargs: Any) -> Any:
        """POST ``data`` as JSON to ``url`` and decode the JSON body."""
        async with self.session.post(
            url, json=data, proxy=self.network.proxy_for(url), **kwargs
        ) as response:
            response.raise_for_status()
            return await response.json()
