"""
Timing instrumentation.

Request durations and named spans (e.g. cache refreshes) are logged outside
production mode. Nothing here changes response content.
"""
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


def format_duration(duration_ms: float) -> str:
    """Format a duration as zero-padded milliseconds, e.g. '004.215ms'."""
    return f"{duration_ms:07.3f}ms"


def _log_span(name: str, duration_ms: float) -> None:
    logger.info(
        "%s %s",
        name,
        format_duration(duration_ms),
        extra={"span": name, "duration_ms": duration_ms},
    )


@contextmanager
def measure(name: str, enabled: bool = True) -> Iterator[None]:
    """Log how long the wrapped block took, under the given span name."""
    if not enabled:
        yield
        return
    start = time.perf_counter()
    try:
        yield
    finally:
        _log_span(name, (time.perf_counter() - start) * 1000)


class RequestTimingMiddleware:
    """
    Log the duration of every HTTP request when enabled.

    The clock stops when the last body chunk of the response has been sent,
    so streamed responses are timed to completion rather than to their headers.
    """

    def __init__(self, app: ASGIApp, enabled: bool = True) -> None:
        self.app = app
        self.enabled = enabled

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:  # noqa: D102
        if not self.enabled or scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        name = f"{scope['method']} {scope['path']}"
        start = time.perf_counter()
        logged = False

        def log_duration() -> None:
            nonlocal logged
            if logged:
                return
            logged = True
            _log_span(name, (time.perf_counter() - start) * 1000)

        async def send_timed(message: Message) -> None:
            await send(message)
            if message["type"] == "http.response.body" and not message.get("more_body", False):
                log_duration()

        try:
            await self.app(scope, receive, send_timed)
        finally:
            # Requests that fail before a complete response are still timed
            log_duration()
