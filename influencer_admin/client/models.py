from __future__ import annotations

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ProductCacheEntry(Base):
    __tablename__ = "product_search_cache"

    key: Mapped[str] = mapped_column(String(length=512), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    total_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    timestamp: Mapped[float] = mapped_column(Float, nullable=False)
