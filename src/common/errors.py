from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError
from starlette import status
from starlette.requests import Request
from starlette.responses import JSONResponse

from src.common.logger import logger
from src.settings.config import PRODUCT_NOT_FOUND


class _Missing:
    """Маркер отсутствующего в запросе поля (в отличие от null)."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def json_safe(value: Any) -> Any:
    """Не конечные float -> None, как JSON.stringify в JS."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, list):
        return [json_safe(v) for v in value]
    if isinstance(value, dict):
        return {k: json_safe(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class FieldError:
    """Одна ошибка валидации поля запроса."""

    field: str
    message: str
    location: str = "body"
    value: Any = MISSING

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": "field"}
        if self.value is not MISSING:
            out["value"] = json_safe(self.value)
        out["msg"] = self.message
        out["path"] = self.field
        out["location"] = self.location
        return out


class RequestValidationFailed(Exception):
    """Запрос не прошёл цепочку валидаторов -> 400 {errors: [...]}."""

    def __init__(self, errors: List[FieldError]) -> None:
        self.errors = errors
        super().__init__(f"{len(errors)} validation error(s)")


class ProductNotFound(Exception):
    """Товар с таким id не найден -> 404 {error: ...}."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(PRODUCT_NOT_FOUND)


async def validation_failed_handler(request: Request, exc: RequestValidationFailed) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": [e.to_dict() for e in exc.errors]},
    )


async def product_not_found_handler(request: Request, exc: ProductNotFound) -> JSONResponse:
    logger.info("Product %s not found", exc.product_id)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": PRODUCT_NOT_FOUND},
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Storage error on %s %s - %s", request.method, request.url.path, exc, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationFailed, validation_failed_handler)
    app.add_exception_handler(ProductNotFound, product_not_found_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
