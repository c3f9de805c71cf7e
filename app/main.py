import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config.settings import Settings, settings
from app.database.memory_store import MemoryStore
from app.modules.groups import routes as groups_routes
from app.modules.groups.ttl_scheduler import ttl_scheduler_loop
from app.modules.locations import routes as locations_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware:
    """Adds security headers to every HTTP response and logs the request line."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                logger.info(f"{scope['method']} {scope['path']} -> {message['status']}")
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"x-content-type-options", b"nosniff"),
                    (b"x-frame-options", b"DENY"),
                    (b"x-xss-protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


def _format_validation_errors(errors) -> str:
    parts = []
    for error in errors:
        field = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{field}: {error['msg']}" if field else error["msg"])
    return "; ".join(parts) or "Invalid request"


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings: Settings = app.state.settings
    logger.info("Application startup")

    cleanup_task: Optional[asyncio.Task] = None
    if app_settings.scheduler_enabled:
        cleanup_task = asyncio.create_task(
            ttl_scheduler_loop(app.state.store, app_settings.cleanup_interval_seconds)
        )
        logger.info(
            f"TTL scheduler started - will check for expired groups every "
            f"{app_settings.cleanup_interval_seconds} seconds"
        )

    yield

    logger.info("Application shutdown")
    if cleanup_task and not cleanup_task.done():
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass


def create_app(app_settings: Optional[Settings] = None, store: Optional[MemoryStore] = None) -> FastAPI:
    """Build the application with its own store, limiter and scheduler."""
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_name,
        debug=app_settings.debug,
        redirect_slashes=False,
        lifespan=lifespan,
        docs_url=None if app_settings.is_production else "/docs",
        redoc_url=None if app_settings.is_production else "/redoc",
    )
    app.state.settings = app_settings
    app.state.store = store or MemoryStore()

    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[app_settings.rate_limit],
        enabled=app_settings.rate_limit_enabled,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # Router 404s for unknown paths; 404s raised by the routes keep their own detail
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(status_code=404, content={"detail": "Endpoint not found"})
        return await http_exception_handler(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _format_validation_errors(exc.errors())})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    cors_origins = app_settings.get_cors_origins_list()
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(groups_routes.router, prefix="/api")
    app.include_router(locations_routes.router, prefix="/api")

    @app.get("/")
    @limiter.exempt
    async def root():
        return {"message": f"Welcome to {app_settings.app_name}", "status": "healthy"}

    @app.get("/health")
    @limiter.exempt
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()
