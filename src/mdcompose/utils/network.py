#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/utils/network.py
"""Network utilities for fetching remote images.

The resolver fetches remote images through an ``httpx.AsyncClient``. Every
request is checked against the URL rules of ``NetworkFetchOptions``
(scheme, HTTPS requirement, host allowlist), redirects included, and
response bodies are streamed with a size limit.

Functions
---------
- is_network_disabled: Global kill switch via environment variable
- validate_image_url: URL validation against the fetch options
- create_async_client: httpx client with validation hooks
- fetch_image_bytes: Size-limited streaming download
"""

from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import urlparse

from mdcompose.constants import DEFAULT_MAX_REDIRECTS, DEFAULT_USER_AGENT, DEPS_NETWORK, DISABLE_NETWORK_ENV_VAR
from mdcompose.exceptions import NetworkSecurityError
from mdcompose.options.renderer import NetworkFetchOptions
from mdcompose.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


def is_network_disabled() -> bool:
    """Check if network access is globally disabled via environment variable.

    Returns
    -------
    bool
        True if ``MDCOMPOSE_DISABLE_NETWORK`` is set to a truthy value

    """
    return os.getenv(DISABLE_NETWORK_ENV_VAR, "").lower() in ("true", "1", "yes", "on")


def _normalize_hostname(hostname: str) -> str:
    """Normalize a hostname for case-insensitive comparison.

    Examples
    --------
    >>> _normalize_hostname("Example.com")
    'example.com'

    """
    try:
        return hostname.encode("idna").decode("ascii").lower()
    except UnicodeError:
        return hostname.lower()


def validate_image_url(url: str, allowed_hosts: list[str] | None = None, require_https: bool = False) -> None:
    """Validate a remote image URL before fetching it.

    Parameters
    ----------
    url : str
        URL to validate
    allowed_hosts : list[str] | None, default None
        Allowed hostnames. If None, all hosts are allowed
    require_https : bool, default False
        If True, only HTTPS URLs are allowed

    Raises
    ------
    NetworkSecurityError
        If the URL fails validation

    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise NetworkSecurityError(f"Unsupported URL scheme: {parsed.scheme or '(none)'}")

    if require_https and parsed.scheme != "https":
        raise NetworkSecurityError(f"HTTPS required but got: {parsed.scheme}")

    hostname = parsed.hostname
    if not hostname:
        raise NetworkSecurityError(f"URL missing hostname: {url}")

    if allowed_hosts is not None:
        normalized = _normalize_hostname(hostname)
        if normalized not in {_normalize_hostname(host) for host in allowed_hosts}:
            raise NetworkSecurityError(f"Hostname not in allowlist: {normalized}")


@requires_dependencies("network", DEPS_NETWORK)
def create_async_client(network: NetworkFetchOptions | None = None, user_agent: str | None = None) -> Any:
    """Create an ``httpx.AsyncClient`` that validates every request URL.

    Parameters
    ----------
    network : NetworkFetchOptions or None, default None
        URL rules and timeout
    user_agent : str or None, default None
        User-Agent header value

    Returns
    -------
    httpx.AsyncClient
        Client following redirects, with each hop validated

    """
    import httpx

    network = network or NetworkFetchOptions()

    async def validate_request_url(request: Any) -> None:
        validate_image_url(str(request.url), allowed_hosts=network.allowed_hosts, require_https=network.require_https)

    async def validate_response_redirects(response: Any) -> None:
        if len(response.history) > DEFAULT_MAX_REDIRECTS:
            raise NetworkSecurityError(f"Too many redirects: {len(response.history)} > {DEFAULT_MAX_REDIRECTS}")

    return httpx.AsyncClient(
        timeout=network.network_timeout,
        follow_redirects=True,
        max_redirects=DEFAULT_MAX_REDIRECTS,
        event_hooks={"request": [validate_request_url], "response": [validate_response_redirects]},
        headers={"User-Agent": user_agent or DEFAULT_USER_AGENT},
    )


@requires_dependencies("network", DEPS_NETWORK)
async def fetch_image_bytes(url: str, client: Any, network: NetworkFetchOptions | None = None) -> bytes:
    """Download an image with streaming size validation.

    Parameters
    ----------
    url : str
        Absolute ``http``/``https`` URL
    client : httpx.AsyncClient
        Client used for the request; it is not closed
    network : NetworkFetchOptions or None, default None
        Fetch rules and limits

    Returns
    -------
    bytes
        Response body

    Raises
    ------
    NetworkSecurityError
        If fetching is disabled, the URL is rejected, the request fails or
        the body exceeds ``max_image_bytes``

    """
    import httpx

    network = network or NetworkFetchOptions()

    if is_network_disabled():
        raise NetworkSecurityError(
            f"Network access is globally disabled via {DISABLE_NETWORK_ENV_VAR} environment variable"
        )
    if not network.allow_remote_fetch:
        raise NetworkSecurityError(f"Remote fetching is disabled, not fetching {url}")

    validate_image_url(url, allowed_hosts=network.allowed_hosts, require_https=network.require_https)

    max_size = network.max_image_bytes
    try:
        async with client.stream("GET", url, timeout=network.network_timeout) as response:
            response.raise_for_status()

            declared = response.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > max_size:
                raise NetworkSecurityError(f"Content-Length too large: {declared} bytes (max: {max_size})")

            chunks = []
            total_size = 0
            async for chunk in response.aiter_bytes(chunk_size=_CHUNK_SIZE):
                total_size += len(chunk)
                if total_size > max_size:
                    raise NetworkSecurityError(f"Response too large: exceeded {max_size} bytes during streaming")
                chunks.append(chunk)

    except NetworkSecurityError:
        raise
    except httpx.HTTPError as e:
        raise NetworkSecurityError(f"HTTP request failed for {url}: {e}", original_error=e) from e

    if total_size == 0:
        raise NetworkSecurityError(f"Empty response received from {url}")

    logger.debug(f"Successfully fetched {total_size} bytes from {url}")
    return b"".join(chunks)
