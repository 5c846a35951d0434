from __future__ import annotations
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field


class ProductSchema(BaseModel):
    """Товар в ответах API (без created_at / updated_at)."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="The Product ID", examples=[1])
    name: str = Field(..., description="The Product name", examples=["Monitor de 45 Pulgadas"])
    price: float = Field(..., description="The Product Price", examples=[300])
    availability: bool = Field(..., description="The Product availability", examples=[True])


class ProductCreate(BaseModel):
    """Тело POST /api/products (только для документации)."""
    name: str = Field(..., examples=["Keyboard black"])
    price: float = Field(..., examples=[599])


class ProductUpdate(ProductCreate):
    """Тело PUT /api/products/{id} (только для документации)."""
    availability: bool = Field(..., examples=[True])


class ProductResponse(BaseModel):
    data: ProductSchema


class ProductCreatedResponse(ProductResponse):
    message: str = Field(..., examples=["created successfully"])


class ProductListResponse(BaseModel):
    data: List[ProductSchema]


class ProductRemovedResponse(BaseModel):
    data: str = Field(..., examples=["Removed Product"])


class NotFoundResponse(BaseModel):
    error: str = Field(..., examples=["Product not found!"])


class ValidationErrorsResponse(BaseModel):
    errors: List[Dict[str, Any]]


def serialize_product(product: Any) -> Dict[str, Any]:
    return ProductSchema.model_validate(product).model_dump()


def request_body_schema(model: type[BaseModel]) -> Dict[str, Any]:
    """requestBody для openapi_extra: тело читается вручную, не через pydantic."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }
