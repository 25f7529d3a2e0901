"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.sh_admin.api.router import router as admin_router
from src.sh_common.database import engine
from src.sh_common.errors import AppError, InternalError, RequestValidationFailedError
from src.sh_common.redis_client import close_redis, get_redis
from src.sh_common.response import error_response
from src.sh_gateway.middleware.request_log import RequestLogMiddleware, get_request_id
from src.sh_negotiation.api.chat_router import router as chat_router
from src.sh_negotiation.api.router import router as negotiation_router
from src.sh_realtime.api.router import router as realtime_router
from src.sh_realtime.hub import RealtimeHub

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("sh.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, connect Redis, start the realtime hub. Shutdown: reverse."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    hub = RealtimeHub(await get_redis())
    await hub.start()
    app.state.realtime_hub = hub
    logger.info("%s started", settings.APP_NAME)
    yield
    await hub.stop()
    app.state.realtime_hub = None
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)


def _error_json(request: Request, status_code: int, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.data)
    resp.request_id = get_request_id(request)
    return JSONResponse(status_code=status_code, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc.http_status, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    return _error_json(request, 400, RequestValidationFailedError(errors))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_json(request, 500, InternalError())


app.include_router(negotiation_router, prefix="/api/v1")
app.include_router(chat_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(realtime_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
