#storefront/data/models/cart_line.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Numeric, DateTime, UniqueConstraint

from storefront.data.database import Base


class CartLineModel(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    # cena jednostkowa z momentu dodania (discount price), nie aktualizujemy jej
    unit_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (UniqueConstraint("user_id", "product_id", name="u_user_product"),)
