#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
UdapRequestTransport -- performs the HTTP requests sent to a TV: fetching its
description document, and posting pairing and command requests.
"""

from __future__ import annotations

import asyncio

import aiohttp

from .internal_types import *
from .pkg_logging import logger
from .constants import DEFAULT_HTTP_TIMEOUT, UDAP_USER_AGENT
from .exceptions import UdapTransportError

def build_url(hostname: str, port: int, path: str) -> str:
    """Returns the http URL of a path on a TV. IPv6 literal hostnames are bracketed."""
    if ':' in hostname and not hostname.startswith('['):
        hostname = f"[{hostname}]"
    return f"http://{hostname}:{port}{path}"

class UdapResponse:
    """The status and body of a completed HTTP request."""

    status_code: int
    body: str

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def __str__(self) -> str:
        return f"UdapResponse(status_code={self.status_code}, body={self.body!r})"

    def __repr__(self) -> str:
        return str(self)

class UdapRequestTransport(AsyncContextManager['UdapRequestTransport']):
    """
    Sends HTTP requests to TVs over a shared aiohttp.ClientSession. Unless one is
    passed in, the session is created on first use and closed by close(). The timeout
    and User-Agent are applied to each request, so they hold for an injected session too.

    Non-200 responses are returned normally; only failures to complete a request
    raise UdapTransportError.
    """

    timeout: float
    """The total timeout (in seconds) for one request."""

    _session: Optional[aiohttp.ClientSession] = None
    _owns_session: bool = True

    def __init__(self, timeout: float=DEFAULT_HTTP_TIMEOUT, session: Optional[aiohttp.ClientSession]=None) -> None:
        self.timeout = timeout
        if session is not None:
            self._session = session
            self._owns_session = False

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def request(
            self,
            method: str,
            hostname: str,
            port: int,
            path: str,
            body: Optional[str]=None,
          ) -> UdapResponse:
        url = build_url(hostname, port, path)
        headers: Dict[str, str] = { "User-Agent": UDAP_USER_AGENT }
        if body is not None:
            headers["Content-Type"] = "text/xml; charset=utf-8"
        logger.debug(f"{method} {url} body={body!r}")
        try:
            async with self.session.request(
                    method, url, data=body, headers=headers, timeout=aiohttp.ClientTimeout(total=self.timeout)
                  ) as resp:
                text = await resp.text(errors='replace')
                result = UdapResponse(resp.status, text)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise UdapTransportError(f"{method} {url} failed: {e!r}") from e
        logger.debug(f"{method} {url} -> {result.status_code}")
        return result

    async def get(self, hostname: str, port: int, path: str) -> UdapResponse:
        return await self.request("GET", hostname, port, path)

    async def post(self, hostname: str, port: int, path: str, body: str) -> UdapResponse:
        return await self.request("POST", hostname, port, path, body)

    async def close(self) -> None:
        if self._owns_session and not self._session is None:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> UdapRequestTransport:
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        await self.close()
        return False
