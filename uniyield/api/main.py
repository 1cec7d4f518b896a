"""FastAPI application backing the UniYield deposit UI."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from uniyield import __version__
from uniyield.api.endpoints import router
from uniyield.errors import ConfigurationError, ExtractionError, QuoteError, UniYieldError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("UNIYIELD_HOST", "0.0.0.0")
PORT = int(os.environ.get("UNIYIELD_PORT", "8000"))
DEBUG = os.environ.get("UNIYIELD_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="UniYield",
    description="Cross-chain USDC deposits into the UniYield vault",
    version=__version__,
)


def _error_body(err: UniYieldError) -> dict[str, object]:
    return {
        "detail": err.message,
        "userMessage": err.user_message,
        "retryable": err.retryable,
    }


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, err: ConfigurationError) -> JSONResponse:
    logger.warning("configuration_error", path=request.url.path, error=err.message)
    return JSONResponse(status_code=400, content=_error_body(err))


@app.exception_handler(ExtractionError)
@app.exception_handler(QuoteError)
async def upstream_error_handler(request: Request, err: UniYieldError) -> JSONResponse:
    logger.warning(
        "routing_service_error",
        path=request.url.path,
        error_type=type(err).__name__,
        error=err.message,
    )
    return JSONResponse(status_code=502, content=_error_body(err))


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - UNIYIELD_HOST: Host to bind to (default: 0.0.0.0)
    - UNIYIELD_PORT: Port to bind to (default: 8000)
    - UNIYIELD_DEBUG: Enable debug/reload mode (default: false)
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ]
    )
    uvicorn.run(
        "uniyield.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
