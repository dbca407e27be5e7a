# product_service/main.py
from decimal import Decimal

from fastapi import FastAPI, HTTPException

from storefront.domain.product import Product

app = FastAPI(title="Product Service (dev mock)")


PRODUCTS = {
    1: Product(id=1, title="Keyboard", price=Decimal("199.99"), discount_percent=10),
    2: Product(id=2, title="Mouse", price=Decimal("49.50")),
    3: Product(id=3, title="Monitor", price=Decimal("899.00"), discount_percent=25),
    4: Product(id=4, title="Webcam", price=Decimal("120.00"), active=False),
}


@app.get("/products/{product_id}", response_model=Product)
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
