# contact_relay/core/origins.py
import logging
from typing import Iterable, List

from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

log = logging.getLogger("uvicorn.error")


class OriginAllowList:
    """Browser origins permitted to call the API.

    An entry matches an origin that is identical to it, or one that continues
    it past a "/" boundary. "https://a.b" does not match "https://a.b.evil.com".
    """

    def __init__(self, entries: Iterable[str]):
        self.entries: List[str] = []
        for raw in entries:
            entry = (raw or "").strip().rstrip("/")
            if entry and entry not in self.entries:
                self.entries.append(entry)

    def allows(self, origin: str) -> bool:
        origin = (origin or "").strip()
        if not origin:
            return False
        for entry in self.entries:
            if origin == entry or origin.startswith(entry + "/"):
                return True
        return False


class OriginGuardMiddleware(CORSMiddleware):
    """CORS headers for allowed origins, 403 for everything else.

    Requests without an Origin header (curl, cron jobs, server-to-server)
    pass straight through.
    """

    def __init__(self, app: ASGIApp, allow_list: OriginAllowList):
        super().__init__(
            app,
            allow_origins=allow_list.entries,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
        self.allow_list = allow_list

    def is_allowed_origin(self, origin: str) -> bool:
        return self.allow_list.allows(origin)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            origin = Headers(scope=scope).get("origin")
            if origin is not None and not self.is_allowed_origin(origin):
                log.warning(f"[cors] rejected origin {origin} for {scope.get('path')}")
                response = JSONResponse(
                    status_code=403,
                    content={"ok": False, "error": "origin not allowed"},
                )
                await response(scope, receive, send)
                return
        await super().__call__(scope, receive, send)
