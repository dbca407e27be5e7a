# storefront/domain/product.py
from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel, Field, computed_field

_CENTS = Decimal("0.01")


class Product(BaseModel):
    """Produkt z katalogu (tylko odczyt)."""

    id: int
    title: str
    price: Decimal = Field(..., ge=0)
    discount_percent: int = Field(0, ge=0, le=100)
    active: bool = True

    @computed_field
    @property
    def discount_price(self) -> Decimal:
        # liczone zawsze z price i discount_percent, nigdy nie zapisywane osobno
        raw = self.price * (100 - self.discount_percent) / Decimal(100)
        return raw.quantize(_CENTS, rounding=ROUND_HALF_UP)
