"""
Point d'entree FastAPI / FastAPI entry point.
Diesel Log - Suivi des achats de gasoil par camion / Diesel purchase log per lorry.
"""

import json
import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from diesel_log.api import api_router
from diesel_log.config import Settings, settings as default_settings
from diesel_log.database import RecordStore
from diesel_log.errors import RecordError
from diesel_log.rate_limit import limiter
from diesel_log.services.record_service import RecordService

logger = logging.getLogger("diesel_log")


class JSONFormatter(logging.Formatter):
    """Logs JSON structures en production / Structured JSON logs in production."""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            log_entry["request_id"] = request_id
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(settings: Settings) -> None:
    """JSON en production, texte en dev / JSON in production, plain text in dev."""
    handler = logging.StreamHandler()
    if settings.DEBUG:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    else:
        handler.setFormatter(JSONFormatter())
    logging.root.handlers = [handler]
    logging.root.setLevel(settings.LOG_LEVEL.upper())


# Securite / Security headers middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Ajoute les headers de securite / Add security headers."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# Request ID tracking middleware
class RequestIDMiddleware(BaseHTTPMiddleware):
    """Ajoute un X-Request-ID unique a chaque requete / Add unique X-Request-ID to each request."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


async def record_error_handler(request: Request, exc: RecordError) -> JSONResponse:
    """Erreurs metier -> 400/404/500 / Domain errors -> 400/404/500."""
    request_id = getattr(request.state, "request_id", None)
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message,
                     extra={"request_id": request_id})
    else:
        logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.message,
                     extra={"request_id": request_id})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corps JSON mal forme -> 400 / Malformed JSON body -> 400."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=400, content={"errors": messages, "error": "; ".join(messages)})


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    """Construire l'application / Build the application.

    Le store est cree ici puis injecte dans le service / The store is built here and injected into the service.
    """
    settings = settings or default_settings
    store = store or RecordStore(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialisation et fermeture / Startup and shutdown."""
        # Creer les tables au demarrage / Create tables on startup
        await store.init()
        logger.info("%s %s startup", settings.APP_NAME, settings.APP_VERSION)
        yield
        await store.dispose()

    # Desactiver Swagger en production / Disable Swagger in production
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Suivi des achats de gasoil par camion / Diesel purchase records per lorry",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )

    app.state.store = store
    app.state.record_service = RecordService(store)

    # Rate limiting
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RecordError, record_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Requested-With", "X-Request-ID"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Routes API
    app.include_router(api_router)

    # Sante de l'API / API health check
    @app.get("/api/")
    async def api_health():
        """Health check."""
        return {"app": settings.APP_NAME, "version": settings.APP_VERSION, "status": "running"}

    @app.get("/")
    async def root():
        """Health check (racine / root)."""
        return {"app": settings.APP_NAME, "version": settings.APP_VERSION, "status": "running"}

    return app


configure_logging(default_settings)
app = create_app()
