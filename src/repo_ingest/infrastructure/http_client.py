"""Factory for the outbound ``httpx.AsyncClient``."""

from __future__ import annotations

import logging

import httpx

from repo_ingest.infrastructure.config import Settings

logger = logging.getLogger(__name__)


def normalize_proxy(proxy: str | None) -> str | None:
    """Strip blanks and default a bare ``host:port`` to the ``http://`` scheme."""
    if proxy is None:
        return None
    proxy = proxy.strip()
    if not proxy:
        return None
    if not proxy.startswith(("http://", "https://", "socks5://", "socks5h://")):
        proxy = f"http://{proxy}"
    return proxy


def build_http_client(settings: Settings, proxy: str | None = None) -> httpx.AsyncClient:
    """Build a client with a per-request timeout and an optional explicit proxy.

    The proxy is bound to this client only; process environment is left alone
    so concurrent requests with different proxies cannot interfere.
    """
    proxy_url = normalize_proxy(proxy) or normalize_proxy(settings.github_proxy)
    if proxy_url:
        logger.info("Routing GitHub traffic through proxy %s", proxy_url)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_s),
        proxy=proxy_url,
        follow_redirects=True,
    )
