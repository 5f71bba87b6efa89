# blogcms/main.py

"""blogcms Backend - travel blog CMS API on a secure route pipeline."""

from logging import getLogger

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from blogcms.auth import IdentityProvider, TokenIdentityProvider
from blogcms.configs import file_logger, settings
from blogcms.errors import BaseAppError, app_exception_handler, validation_exception_handler
from blogcms.managers import RateLimiter, SlowapiRateLimiter
from blogcms.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from blogcms.monitoring import configure_logging
from blogcms.routes import create_routers
from blogcms.schemas import HealthCheckResponse
from blogcms.security import PolicyRegistry, SecureRoutePipeline, default_registry
from blogcms.utils.helpers import today_str

logger = file_logger(getLogger(__name__))


def create_app(
    registry: PolicyRegistry | None = None,
    identity: IdentityProvider | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    """
    Assemble the application.

    Parameters
    ----------
    registry : PolicyRegistry | None
        Route policy presets and schema fragments; defaults to
        ``default_registry()``.
    identity : IdentityProvider | None
        Identity collaborator; defaults to JWT bearer tokens.
    rate_limiter : RateLimiter | None
        Rate-limit collaborator; defaults to slowapi with per-class limits
        from settings.

    Returns
    -------
    FastAPI
        The configured application.
    """
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Travel blog CMS API",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        swagger_ui_parameters={"docExpansion": "none", "operationsSorter": "method"},
    )

    configure_cors(app)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    pipeline = SecureRoutePipeline(
        registry=registry or default_registry(),
        identity=identity or TokenIdentityProvider(),
        rate_limiter=rate_limiter or SlowapiRateLimiter(),
    )
    app.state.pipeline = pipeline
    _ = [app.include_router(router) for router in create_routers(pipeline)]

    errors = [
        (BaseAppError, app_exception_handler),
        (RequestValidationError, validation_exception_handler),
    ]
    _ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

    @app.get(
        "/health",
        tags=["🩺 Health"],
        summary="Health check endpoint",
        response_model=HealthCheckResponse,
        operation_id="health_check",
    )
    async def health_check() -> HealthCheckResponse:
        """
        Report service status.

        Examples
        --------
        Request
            GET /health
        Response
            200 OK
            {"version": "1.0.0", "status": "ok", "timestamp": "2025-01-01 10:00:00"}
        """
        return HealthCheckResponse(version=app.version, status="ok", timestamp=today_str())

    logger.info(f"Registered {len(app.routes)} routes on {pipeline.registry.names} presets")
    return app


app = create_app()
