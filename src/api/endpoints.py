from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette import status

from src.api import handlers
from src.api.validation import (
    CREATE_RULES,
    ID_RULES,
    UPDATE_RULES,
    RequestData,
    create_fields,
    product_id,
    update_fields,
    validate_request,
)
from src.common.Schemas.product_schemas import (
    NotFoundResponse,
    ProductCreate,
    ProductCreatedResponse,
    ProductListResponse,
    ProductRemovedResponse,
    ProductResponse,
    ProductUpdate,
    ValidationErrorsResponse,
    request_body_schema,
)
from src.db.CRUD import ProductRepository
from src.db.database import get_db
from src.settings.config import PRODUCTS_TAG

router: APIRouter = APIRouter(tags=[PRODUCTS_TAG])


def get_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


def _id_parameter(description: str) -> Dict[str, Any]:
    return {
        "in": "path",
        "name": "id",
        "description": description,
        "required": True,
        "schema": {"type": "integer"},
    }


BAD_REQUEST = {
    status.HTTP_400_BAD_REQUEST: {
        "model": ValidationErrorsResponse,
        "description": "Bad Request - Invalid ID or Invalid input data",
    }
}
NOT_FOUND = {
    status.HTTP_404_NOT_FOUND: {"model": NotFoundResponse, "description": "Product Not Found"}
}


# ---------------- Products ---------------- #

@router.get(
    "",
    summary="Get a list of products",
    description="Return a list of products",
    response_model=ProductListResponse,
)
def get_products(repo: ProductRepository = Depends(get_repository)) -> Dict[str, Any]:
    return handlers.get_products(repo)


@router.get(
    "/{id}",
    summary="Get a product by ID",
    description="Return a product based on its unique ID",
    response_model=ProductResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    openapi_extra={"parameters": [_id_parameter("The ID of the product to retrieve")]},
)
def get_product_by_id(
    data: RequestData = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> Dict[str, Any]:
    return handlers.get_product_by_id(repo, product_id(data))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Creates a new product",
    description="Return a new record in the database",
    response_model=ProductCreatedResponse,
    responses=BAD_REQUEST,
    openapi_extra=request_body_schema(ProductCreate),
)
def create_product(
    data: RequestData = Depends(validate_request(CREATE_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> Dict[str, Any]:
    return handlers.create_product(repo, **create_fields(data))


@router.put(
    "/{id}",
    summary="Updates a product with user input",
    description="Returns the updated product",
    response_model=ProductResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    openapi_extra={
        "parameters": [_id_parameter("The ID of the product to update")],
        **request_body_schema(ProductUpdate),
    },
)
def update_product(
    data: RequestData = Depends(validate_request(UPDATE_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> Dict[str, Any]:
    return handlers.update_product(repo, product_id(data), **update_fields(data))


@router.patch(
    "/{id}",
    summary="Update Product availability",
    description="Returns the updated availability",
    response_model=ProductResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    openapi_extra={"parameters": [_id_parameter("The ID of the product to update")]},
)
def update_availability(
    data: RequestData = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> Dict[str, Any]:
    return handlers.update_availability(repo, product_id(data))


@router.delete(
    "/{id}",
    summary="Deletes a product by a given ID",
    description="Returns a confirmation message",
    response_model=ProductRemovedResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    openapi_extra={"parameters": [_id_parameter("The ID of the product to delete")]},
)
def delete_product(
    data: RequestData = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> Dict[str, Any]:
    return handlers.delete_product(repo, product_id(data))
