import logging
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth.credentials import CredentialValidator
from .auth.issuer import TokenIssuer
from .auth.router import router as auth_router
from .auth.service import AccessService
from .auth.verifier import TokenVerifier
from .core.errors import INTERNAL_ERROR
from .core.logging import configure_logging
from .core.ratelimit import RateLimitExceeded, SlidingWindowRateLimiter, client_address
from .core.settings import Settings, get_settings
from .health.router import router as health_router

logger = logging.getLogger(__name__)


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    address = client_address(request, request.app.state.settings.TRUST_PROXY)
    logger.info(f'{address} "{request.method} {request.url.path}" {response.status_code} {duration_ms:.1f}ms')
    return response


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=exc.error.status_code,
        content=exc.error.to_body(),
        headers=exc.decision.headers(),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=INTERNAL_ERROR.status_code, content=INTERNAL_ERROR.to_body())


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Builds the gateway. Configuration is read once here and handed to the
    validator, issuer and verifier.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.rate_limiter = SlidingWindowRateLimiter()
    app.state.access_service = AccessService(
        validator=CredentialValidator.from_settings(settings),
        issuer=TokenIssuer.from_settings(settings),
        verifier=TokenVerifier.from_settings(settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)
    app.include_router(auth_router)

    @app.get("/")
    def read_root():
        return {"message": f"Welcome to {settings.PROJECT_NAME}"}

    # Any OPTIONS request gets an empty 204
    @app.options("/{path:path}", include_in_schema=False)
    def options(path: str):
        return Response(status_code=204)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().PORT)
