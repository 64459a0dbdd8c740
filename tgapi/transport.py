"""HTTP transport -- one POST per API method.

Blocking :mod:`requests` calls run on daemon worker threads and hand their
outcome back to the event loop, so the loop keeps serving the poller and
other outbound calls while a request is in flight.  Cancelling the awaiting
task returns control at once; the abandoned worker never keeps the process
alive at interpreter or ``asyncio.run`` shutdown.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Optional

import requests

from tgapi.exceptions import TransportError

logger = logging.getLogger("tgapi.transport")


def _settle(future: asyncio.Future, result: Any, error: Optional[BaseException]) -> None:
    if future.done():
        # The awaiting task was cancelled; the outcome has no taker.
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


async def run_in_daemon_thread(func: Callable[..., Any], *args: Any, name: str = "tgapi-http") -> Any:
    """Run ``func(*args)`` on a fresh daemon thread and await its result.

    Unlike :func:`asyncio.to_thread`, the worker does not belong to the
    loop's default executor, so shutdown never waits for it.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def worker() -> None:
        try:
            result, error = func(*args), None
        except BaseException as exc:  # handed to the awaiting task
            result, error = None, exc
        try:
            loop.call_soon_threadsafe(_settle, future, result, error)
        except RuntimeError:
            # Event loop already closed.
            pass

    threading.Thread(target=worker, name=name, daemon=True).start()
    return await future


class Transport:
    """Sends encoded bodies to ``{api_url}/{method}`` and returns raw bytes."""

    _DEFAULT_TIMEOUT: float = 10

    def __init__(self, api_url: str, timeout: float = _DEFAULT_TIMEOUT) -> None:
        """Create a transport bound to *api_url* (base URL including the token)."""
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def url_for(self, method: str) -> str:
        return f"{self._api_url}/{method.lstrip('/')}"

    def _post_sync(self, url: str, body: bytes, content_type: str, timeout: float) -> bytes:
        # The with-block releases the connection even if the caller later
        # fails to decode the body.
        with requests.post(
            url,
            data=body,
            headers={"Content-Type": content_type},
            timeout=timeout,
        ) as response:
            content = response.content
            logger.debug(
                "HTTP response received",
                extra={"status_code": response.status_code, "bytes": len(content)},
            )
            return content

    async def post(
        self,
        method: str,
        body: bytes,
        content_type: str,
        timeout: Optional[float] = None,
    ) -> bytes:
        """POST *body* for *method* and return the raw response body.

        A non-2xx status is not an error here; the envelope decides.

        Raises:
            TransportError: On connection, timeout or read failures.
            asyncio.CancelledError: If the awaiting task is cancelled.  The
                request is abandoned immediately.
        """
        url = self.url_for(method)
        try:
            return await run_in_daemon_thread(
                self._post_sync, url, body, content_type, timeout or self._timeout,
                name=f"tgapi-http-{method}",
            )
        except requests.RequestException as exc:
            logger.warning("HTTP request failed", extra={"api_endpoint": method, "error": str(exc)})
            raise TransportError(f"{method}: {exc}") from exc
