from sqlalchemy import BigInteger, Boolean, Column, DateTime, Float, Integer, String, func, true
from src.db.database import Base

class Product(Base):
    __tablename__ = "products"
    # id не переиспользуется после удаления (для SQLite нужен AUTOINCREMENT)
    __table_args__ = {"sqlite_autoincrement": True}

    # AUTOINCREMENT в SQLite возможен только для INTEGER PRIMARY KEY
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    availability = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
