# shopping_cart/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from shopping_cart.api.dependencies import get_cart_service, get_current_email
from shopping_cart.domain.errors import CartServiceError, ErrorKind
from shopping_cart.domain.schemas import CartOut, CreateCartIn, ItemIn
from shopping_cart.services.cart_service import CartService
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 400,
}


def to_http_error(e: CartServiceError) -> HTTPException:
    return HTTPException(status_code=STATUS_BY_KIND[e.kind], detail=e.message)


@router.get("", response_model=CartOut)
def get_cart(
    email: str = Depends(get_current_email),
    svc: CartService = Depends(get_cart_service),
):
    try:
        cart = svc.get_cart(email)
    except CartServiceError as e:
        raise to_http_error(e)
    except Exception as e:
        logger.exception("GET /cart failed")
        raise HTTPException(status_code=500, detail=str(e))
    if not cart:
        raise HTTPException(status_code=404, detail="Active cart not found")
    return cart


@router.post("", response_model=CartOut)
def create_cart(
    payload: CreateCartIn,
    email: str = Depends(get_current_email),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.create_cart(email, payload.items)
    except CartServiceError as e:
        raise to_http_error(e)
    except Exception as e:
        logger.exception("POST /cart failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/cart-items", response_model=CartOut)
def add_to_cart(
    items: List[ItemIn],
    email: str = Depends(get_current_email),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.add_items(email, items)
    except CartServiceError as e:
        raise to_http_error(e)
    except Exception as e:
        logger.exception("PATCH /cart/cart-items failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/cancel", response_model=CartOut)
def cancel_cart(
    email: str = Depends(get_current_email),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.cancel_cart(email)
    except CartServiceError as e:
        raise to_http_error(e)
    except Exception as e:
        logger.exception("PATCH /cart/cancel failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/checkout", response_model=CartOut)
def checkout_cart(
    email: str = Depends(get_current_email),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.checkout_cart(email)
    except CartServiceError as e:
        raise to_http_error(e)
    except Exception as e:
        logger.exception("POST /cart/checkout failed")
        raise HTTPException(status_code=500, detail=str(e))
