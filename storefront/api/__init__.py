# storefront/api/__init__.py
from fastapi import HTTPException

from storefront.domain.errors import (
    StorefrontError,
    NotFoundError,
    ValidationError,
    EmptyCartError,
    InvalidTransitionError,
    CheckoutError,
    CartBusyError,
)

_STATUS_CODES = {
    NotFoundError: 404,
    ValidationError: 400,
    EmptyCartError: 400,
    InvalidTransitionError: 409,
    CartBusyError: 409,
    CheckoutError: 500,
}


def http_error(exc: StorefrontError | PermissionError) -> HTTPException:
    """Zamiana wyjatku domenowego na HTTPException ze strukturalnym detail."""
    if isinstance(exc, PermissionError):
        return HTTPException(status_code=403, detail={"kind": "forbidden", "message": str(exc)})
    return HTTPException(status_code=_STATUS_CODES.get(type(exc), 400), detail=exc.to_dict())
