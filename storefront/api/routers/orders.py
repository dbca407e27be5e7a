# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api import http_error
from storefront.api.deps import get_lock_service, get_notification_service
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderCreate, OrderOut, StatusUpdateIn, StatusOut
from storefront.services.checkout_service import CheckoutService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(db, notification_service=notification_service)


def get_checkout_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> CheckoutService:
    return CheckoutService(db, lock_service=lock_service)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Tworzy zamówienie z koszyka użytkownika i czyści koszyk.
    """
    try:
        return svc.place_order(payload.user_id, payload.shipping)
    except StorefrontError as e:
        raise http_error(e)


@router.get("", response_model=List[OrderOut])
def list_orders(user_id: int = Query(..., gt=0), svc: OrderService = Depends(get_service)):
    return svc.list_orders(user_id)


@router.get("/all", response_model=List[OrderOut])
def list_all_orders(svc: OrderService = Depends(get_service)):
    """
    Wszystkie zamówienia dla panelu admina, najnowsze pierwsze.
    """
    return svc.list_all_orders()


@router.get("/statuses", response_model=List[StatusOut])
def list_statuses():
    return OrderService.list_statuses()


@router.get("/search", response_model=OrderOut)
def search_order(reference: str = Query(..., min_length=1), svc: OrderService = Depends(get_service)):
    try:
        return svc.get_order_by_reference(reference)
    except StorefrontError as e:
        raise http_error(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_service),
):
    """
    Pobiera szczegóły zamówienia.
    """
    try:
        return svc.get_order(order_id, user_id)
    except (StorefrontError, PermissionError) as e:
        raise http_error(e)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: StatusUpdateIn,
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.update_status(order_id, payload.status)
    except StorefrontError as e:
        raise http_error(e)
