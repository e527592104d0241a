"""Request ID middleware (raw ASGI).

Forwards a client-supplied request id when it is safe to log, otherwise
mints one, and echoes it on the response.
"""

import re
from collections.abc import Awaitable, Callable
from typing import Any

from portal.shared.utils.generators import generate_prefixed_id

REQUEST_ID_MAX_LENGTH = 64
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)

Scope = dict[str, Any]
Receive = Callable[[], Awaitable[dict]]
Send = Callable[[dict], Awaitable[None]]


def sanitize_request_id(raw: str | None) -> str:
    """Return raw when it matches the safe pattern, else a new id."""
    candidate = (raw or "").strip()
    if _SAFE_REQUEST_ID.match(candidate):
        return candidate
    return generate_prefixed_id("req")


class RequestIDMiddleware:
    def __init__(self, app: Callable, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name
        self._header_key = header_name.lower().encode("latin-1")

    def _incoming(self, scope: Scope) -> str | None:
        for key, value in scope.get("headers", []):
            if key.lower() == self._header_key:
                return value.decode("latin-1")
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        request_id = sanitize_request_id(self._incoming(scope))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (self._header_key, request_id.encode("latin-1")),
                ]
            await send(message)

        await self.app(scope, receive, send_with_id)
