from __future__ import annotations

from typing import Any, Dict

from src.common.errors import ProductNotFound
from src.common.Schemas.product_schemas import serialize_product
from src.db.CRUD import ProductRepository
from src.db.Models.product_models import Product
from src.settings.config import PRODUCT_CREATED, PRODUCT_REMOVED, PRODUCTS_PAGE_SIZE


def _get_or_404(repo: ProductRepository, product_id: int) -> Product:
    product = repo.find_by_key(product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product


def get_products(repo: ProductRepository) -> Dict[str, Any]:
    products = repo.find_all(order_by="id", limit=PRODUCTS_PAGE_SIZE)
    return {"data": [serialize_product(p) for p in products]}


def get_product_by_id(repo: ProductRepository, product_id: int) -> Dict[str, Any]:
    return {"data": serialize_product(_get_or_404(repo, product_id))}


def create_product(repo: ProductRepository, name: str, price: float) -> Dict[str, Any]:
    # availability при создании всегда по умолчанию (true)
    product = repo.create({"name": name, "price": price})
    return {"message": PRODUCT_CREATED, "data": serialize_product(product)}


def update_product(
    repo: ProductRepository,
    product_id: int,
    name: str,
    price: float,
    availability: bool,
) -> Dict[str, Any]:
    product = repo.update(
        product_id, {"name": name, "price": price, "availability": availability}
    )
    if product is None:
        raise ProductNotFound(product_id)
    return {"data": serialize_product(product)}


def update_availability(repo: ProductRepository, product_id: int) -> Dict[str, Any]:
    product = _get_or_404(repo, product_id)
    product = repo.update(product_id, {"availability": not product.availability})
    if product is None:
        raise ProductNotFound(product_id)
    return {"data": serialize_product(product)}


def delete_product(repo: ProductRepository, product_id: int) -> Dict[str, Any]:
    # TODO: логическое удаление (флаг видимости) вместо физического
    if not repo.delete(product_id):
        raise ProductNotFound(product_id)
    return {"data": PRODUCT_REMOVED}
