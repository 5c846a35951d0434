from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette import status
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.api import endpoints
from src.common.errors import register_exception_handlers
from src.common.logger import logger, setup_logging
from src.db.database import Database
from src.db.Models import product_models as _product_models  # регистрирует Product на Base.metadata для Database.connect()
from src.settings.config import (
    API_DESCRIPTION,
    API_TITLE,
    API_VERSION,
    OPENAPI_TAGS,
    PRODUCTS_PREFIX,
)
from src.settings.db_settings import Settings, settings as default_settings


def _origin_guard(allowed_origin: Optional[str]):
    """Запросы с чужим Origin отклоняются до роутинга."""

    async def guard(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        origin = request.headers.get("origin")
        if origin is not None and origin != allowed_origin:
            logger.warning("Rejected cross-origin request from %s", origin)
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": "Not allowed by CORS"},
            )
        return await call_next(request)

    return guard


async def _log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %s %.3f ms", request.method, request.url.path, response.status_code, elapsed_ms
    )
    return response


def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    app_settings = app_settings or default_settings
    setup_logging(app_settings.LOG_LEVEL)
    database = database or Database(app_settings.DATABASE_URL, echo=app_settings.DB_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database.connect()
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title=API_TITLE,
        version=API_VERSION,
        description=API_DESCRIPTION,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs",
        lifespan=lifespan,
    )
    app.state.database = database

    allowed_origins = [app_settings.FRONTEND_URL] if app_settings.FRONTEND_URL else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # последний добавленный middleware - внешний
    app.middleware("http")(_log_requests)
    app.middleware("http")(_origin_guard(app_settings.FRONTEND_URL))

    register_exception_handlers(app)
    app.include_router(endpoints.router, prefix=PRODUCTS_PREFIX)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
    )
