"""
Error handlers for the REST API
"""
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from solana_analytics.utils.errors import ActionError, AnalyticsError, ErrorCode

# Setup logger
logger = structlog.get_logger("solana_analytics.api.errors")

STATUS_BY_ERROR_CODE = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.DATA_UNAVAILABLE: 404,
    ErrorCode.CONFIGURATION_MISSING: 503,
    ErrorCode.UPSTREAM_ERROR: 502,
}


def status_for_error(exc: AnalyticsError) -> int:
    """HTTP status for an error; action errors take the status of their cause."""
    code = exc.cause_code if isinstance(exc, ActionError) else exc.error_code
    return STATUS_BY_ERROR_CODE.get(code, 500)


def register_error_handlers(app: FastAPI) -> None:
    """Register global error handlers for the application"""

    @app.exception_handler(AnalyticsError)
    async def analytics_error_handler(request: Request, exc: AnalyticsError):
        """Handle errors raised by the actions"""
        status_code = status_for_error(exc)
        logger.warning(
            "Action failed",
            status_code=status_code,
            error_code=exc.error_code.value,
            error=exc.message,
            path=request.url.path
        )
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions"""
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all uncaught exceptions"""
        logger.exception(
            "Uncaught exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if app.debug else "An unexpected error occurred"
            }
        )
