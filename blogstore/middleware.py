import logging
import time
from contextvars import ContextVar

from sqlalchemy import event
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from blogstore.config import settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Per-request SQL statement counter
# ---------------------------------------------------------------------------

query_count_var: ContextVar[int] = ContextVar("query_count", default=0)


def install_query_counter(engine) -> None:
    """
    Count every statement *engine* sends to the database in
    ``query_count_var``.

    This is what makes the listing contract observable from outside: a
    page of posts costs COUNT + SELECT + one tag query, however many posts
    the page holds.  Call once per engine (``database.py`` for production,
    ``conftest.py`` for the test engine).
    """

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _count_statement(conn, cursor, statement, parameters, context, executemany):
        query_count_var.set(query_count_var.get() + 1)


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

class TimingMiddleware:
    """
    Pure ASGI middleware adding ``X-Response-Time-Ms`` and ``X-Query-Count``
    to every HTTP response.

    It runs the app in the caller's task (unlike ``BaseHTTPMiddleware``),
    so the counter the engine listener bumps is the one read here.
    Requests whose statement count reaches ``settings.QUERY_COUNT_WARN_THRESHOLD``
    are logged at WARNING; they usually mean a per-row lookup crept into a
    listing.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        query_count_var.set(0)
        start = time.perf_counter()

        async def send_with_diagnostics(message: Message) -> None:
            if message["type"] == "http.response.start":
                elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
                queries = query_count_var.get()
                message["headers"] = [
                    *message.get("headers", []),
                    (b"x-response-time-ms", str(elapsed_ms).encode()),
                    (b"x-query-count", str(queries).encode()),
                ]
                _log_request(scope, message["status"], elapsed_ms, queries)
            await send(message)

        await self.app(scope, receive, send_with_diagnostics)


def _log_request(scope: Scope, status: int, elapsed_ms: float, queries: int) -> None:
    level = logging.DEBUG
    if queries >= settings.QUERY_COUNT_WARN_THRESHOLD:
        level = logging.WARNING
    logger.log(
        level,
        "%s %s -> %d in %.2fms (%d queries)",
        scope["method"], scope["path"], status, elapsed_ms, queries,
    )
