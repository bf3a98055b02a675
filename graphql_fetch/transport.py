"""
Transport contract and the default aiohttp transport.

A transport is an async callable
``fetch(url, *, method, headers, body, signal=None, **options)`` returning an
object with ``ok``, ``status``, ``headers`` and ``async text()``. The client
calls it exactly once per request and never retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Mapping, Optional, Protocol

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy

from .exceptions import RequestAbortedError

logger = logging.getLogger(__name__)


class ResponseLike(Protocol):
    """What the pipeline needs from a transport response."""

    @property
    def ok(self) -> bool:
        ...

    @property
    def status(self) -> int:
        ...

    @property
    def headers(self) -> Mapping[str, str]:
        ...

    async def text(self) -> str:
        ...


class Fetch(Protocol):
    """Transport callable."""

    def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: CIMultiDict,
        body: Optional[str] = None,
        signal: Optional[asyncio.Event] = None,
        **options: Any,
    ) -> Awaitable[ResponseLike]:
        ...


class FetchResponse:
    """
    Fully read HTTP response.

    The body is read before the underlying connection is released, so the
    response stays usable after the session that produced it is closed.
    """

    def __init__(self, status: int, headers: Mapping[str, str], body: str) -> None:
        self.status = status
        self.headers = CIMultiDictProxy(CIMultiDict(headers))
        self._body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def text(self) -> str:
        return self._body

    def __repr__(self) -> str:
        return f"FetchResponse(status={self.status})"


class AiohttpTransport:
    """
    Default transport built on aiohttp.

    Without an injected session a session is opened and closed per call.
    Extra keyword arguments are passed to ``ClientSession.request``
    (``timeout``, ``ssl``, ``proxy``...).

    Examples:
        ```python
        async with aiohttp.ClientSession() as session:
            client = GraphQLClient(url, fetch=AiohttpTransport(session))
            data = await client.request("{ me { id } }")
        ```
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None) -> None:
        self._session = session

    async def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: CIMultiDict,
        body: Optional[str] = None,
        signal: Optional[asyncio.Event] = None,
        **options: Any,
    ) -> FetchResponse:
        if signal is not None and signal.is_set():
            raise RequestAbortedError(url=url)

        send = asyncio.ensure_future(self._send(url, method, headers, body, options))
        if signal is None:
            return await send

        aborted = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({send, aborted}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            send.cancel()
            raise
        finally:
            aborted.cancel()

        if send.done():
            return send.result()

        send.cancel()
        try:
            await send
        except asyncio.CancelledError:
            pass
        logger.debug("Request to %s aborted by signal", url)
        raise RequestAbortedError(url=url)

    async def _send(
        self,
        url: str,
        method: str,
        headers: CIMultiDict,
        body: Optional[str],
        options: Mapping[str, Any],
    ) -> FetchResponse:
        if self._session is not None:
            return await self._request(self._session, url, method, headers, body, options)
        async with aiohttp.ClientSession() as session:
            return await self._request(session, url, method, headers, body, options)

    @staticmethod
    async def _request(
        session: aiohttp.ClientSession,
        url: str,
        method: str,
        headers: CIMultiDict,
        body: Optional[str],
        options: Mapping[str, Any],
    ) -> FetchResponse:
        async with session.request(
            method, url, headers=headers, data=body, **options
        ) as response:
            text = await response.text()
            return FetchResponse(response.status, response.headers, text)


default_fetch: Fetch = AiohttpTransport()
