"""English learning assistant: thin API relaying structured prompts to the
user's own OpenAI-compatible model."""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, load_settings
from errors import AppError, ParseError, UpstreamError
from gateway import AIGateway
from log import get_logger
from rate_limit import FixedWindowRateLimiter, RATE_LIMIT_MESSAGE
from routes import router

logger = get_logger("englearn.backend")

API_PREFIX = "/api/v1"
PARSE_FAILURE_MESSAGE = "Cannot parse AI response"


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, UpstreamError):
        message = f"AI service error: {exc.message}"
    elif isinstance(exc, ParseError):
        message = PARSE_FAILURE_MESSAGE
    else:
        message = exc.message
    logger.error(exc.message, extra={
        "component": "api", "endpoint": request.url.path, "status_code": exc.status_code,
        "detail": type(exc).__name__,
    })
    return _error(exc.status_code, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request body", extra={
        "component": "api", "endpoint": request.url.path, "status_code": 400,
        "count": len(exc.errors()),
    })
    return _error(400, "Invalid request body")


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={
        "component": "api", "endpoint": request.url.path, "status_code": 500,
    })
    return _error(500, str(exc) or "Internal server error")


def create_app(settings: Optional[Settings] = None,
               gateway: Optional[AIGateway] = None,
               limiter: Optional[FixedWindowRateLimiter] = None) -> FastAPI:
    """Build the API app. Collaborators default to ones derived from settings."""
    settings = settings or load_settings()
    app = FastAPI(title="English Learning Assistant API")
    app.state.settings = settings
    app.state.gateway = gateway or AIGateway(settings)
    app.state.limiter = limiter or FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max, window=settings.rate_limit_window,
    )

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if not request.url.path.startswith(API_PREFIX) or request.method == "OPTIONS":
            return await call_next(request)
        limiter = request.app.state.limiter
        if not limiter.check():
            headers = limiter.headers()
            headers["Retry-After"] = headers["RateLimit-Reset"]
            return _error(429, RATE_LIMIT_MESSAGE, headers=headers)
        response = await call_next(request)
        response.headers.update(limiter.headers())
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(router)
    return app


app = create_app()


def main():
    import uvicorn

    settings = app.state.settings
    logger.info("Starting server", extra={"component": "startup", "detail": settings.env})
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
