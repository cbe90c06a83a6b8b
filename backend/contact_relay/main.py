# contact_relay/main.py
from typing import Optional
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contact_relay.core.origins import OriginAllowList, OriginGuardMiddleware
from contact_relay.core.settings import Settings
from contact_relay.routers.contact import router as contact_router
from contact_relay.routers.diagnostics import build_router as build_diagnostics_router
from contact_relay.routers.health import router as health_router

log = logging.getLogger("uvicorn.error")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    error = "not found" if exc.status_code == 404 else str(exc.detail).lower()
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": error},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    log.info(f"[main] malformed body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"ok": False, "error": "invalid request body"})


async def catch_unhandled_errors(request: Request, call_next):
    # inside the CORS guard: the 500 envelope keeps its CORS headers
    try:
        return await call_next(request)
    except Exception as exc:
        log.error(f"[main] unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"ok": False, "error": "internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    missing = settings.missing_required()
    if missing:
        # not fatal: sends fail until these are provided
        log.warning(f"[config] missing environment variables: {', '.join(missing)}")

    app = FastAPI(title=settings.api_title)
    app.state.settings = settings

    app.middleware("http")(catch_unhandled_errors)

    allow_list = OriginAllowList(settings.allowed_origins)
    app.add_middleware(OriginGuardMiddleware, allow_list=allow_list)
    log.info(f"[cors] allow-list: {', '.join(allow_list.entries) or '(empty)'}")

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routers
    app.include_router(health_router)
    app.include_router(contact_router)

    if settings.diagnostic_path:
        app.include_router(build_diagnostics_router(settings.diagnostic_path))
        log.info(f"[main] diagnostic route enabled at {settings.diagnostic_path}")
    elif settings.debug_url.strip():
        log.warning(f"[config] DEBUG_URL must start with '/', ignoring: {settings.debug_url}")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port, log_level="info")
