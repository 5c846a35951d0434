from __future__ import annotations
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.common.logger import logger
from src.db.Models.product_models import Product

# ---------- репозиторий товаров ----------

UPDATABLE_FIELDS = ("name", "price", "availability")
# диапазон первичного ключа (BIGINT); id вне него строк не имеет
MIN_KEY = -(2 ** 63)
MAX_KEY = 2 ** 63 - 1


class ProductRepository:
    """
    Доступ к таблице products. Каждая мутация коммитится сразу,
    общей транзакции "найти + изменить" нет.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_all(
        self,
        order_by: str = "id",
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Product]:
        column = getattr(Product, order_by)
        q = select(Product).order_by(column.desc() if descending else column.asc())
        if limit is not None:
            q = q.limit(limit)
        return list(self.db.scalars(q).all())

    def find_by_key(self, product_id: int) -> Optional[Product]:
        if not MIN_KEY <= product_id <= MAX_KEY:
            return None
        return self.db.get(Product, product_id)

    def create(self, fields: Dict[str, Any]) -> Product:
        product = Product(
            name=fields["name"],
            price=fields["price"],
            availability=fields.get("availability", True),
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        logger.info("Product created: id=%s", product.id)
        return product

    def update(self, product_id: int, fields: Dict[str, Any]) -> Optional[Product]:
        product = self.find_by_key(product_id)
        if product is None:
            return None
        for key, value in fields.items():
            if key not in UPDATABLE_FIELDS:
                raise ValueError(f"Field '{key}' can not be updated")
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        logger.info("Product updated: id=%s fields=%s", product.id, sorted(fields))
        return product

    def delete(self, product_id: int) -> bool:
        product = self.find_by_key(product_id)
        if product is None:
            return False
        self.db.delete(product)
        self.db.commit()
        logger.info("Product removed: id=%s", product_id)
        return True
