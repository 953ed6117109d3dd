from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.responses import INTERNAL_ERROR, error_response
from api.router import api_router
from infrastructure.logging import bind_request_context, get_module_logger
from server.lifespan import lifespan

logger = get_module_logger()


handler = FastAPI(title="CES Notifier", lifespan=lifespan)


@handler.middleware("http")
async def logging_context_middleware(request: Request, call_next):
    """Bind a correlation id and the request path to every log entry."""
    with bind_request_context(
        correlation_id=request.headers.get("X-Correlation-ID"),
        request_path=request.url.path,
        request_method=request.method,
    ):
        return await call_next(request)


@handler.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True,
    )
    return error_response("Internal server error", INTERNAL_ERROR, status_code=500)


handler.include_router(api_router)
