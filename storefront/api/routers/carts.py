#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api import http_error
from storefront.api.deps import get_lock_service, get_product_client
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    AddToCartIn,
    QuantityUpdateIn,
    CartLineOut,
    CartOut,
    CartCountOut,
)
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.product_client import ProductClient

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(
        db=db,
        product_client=product_client,
        lock_service=lock_service,
    )


@router.post("", response_model=CartLineOut, status_code=201)
def add_to_cart(payload: AddToCartIn, svc: CartService = Depends(get_service)):
    try:
        return svc.add_to_cart(payload.user_id, payload.product_id)
    except StorefrontError as e:
        raise http_error(e)


@router.get("", response_model=CartOut)
def list_cart(user_id: int = Query(..., gt=0), svc: CartService = Depends(get_service)):
    return svc.list_cart(user_id)


@router.get("/count", response_model=CartCountOut)
def cart_count(user_id: int = Query(..., gt=0), svc: CartService = Depends(get_service)):
    return {"user_id": user_id, "count": svc.cart_count(user_id)}


@router.patch("/{line_id}", response_model=CartOut)
def update_quantity(
    line_id: int,
    payload: QuantityUpdateIn,
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_quantity(line_id, payload.operation)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("/{line_id}", response_model=CartOut)
def remove_line(
    line_id: int,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.remove_line(line_id, user_id)
    except (StorefrontError, PermissionError) as e:
        raise http_error(e)
