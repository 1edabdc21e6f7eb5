"""
FastAPI dependencies: caller identity and service wiring.

The caller's identity is the email carried by a bearer JWT. Tokens are
issued elsewhere; here they are only validated (signature, issuer,
audience, expiry).
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shopping_cart.data.database import get_db
from shopping_cart.services.cart_service import CartService
from shopping_cart.services.lock_service import LockService
from shopping_cart.services.order_client import OrderClient
from shopping_cart.utils.settings import (
    EMAIL_CLAIM,
    JWT_ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    JWT_KEY,
)
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)

# auto_error=False: a missing header is a 401 here, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    if not credentials:
        raise _unauthorized("Authentication required")

    try:
        payload = jwt.decode(
            credentials.credentials,
            JWT_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE or None,
            issuer=JWT_ISSUER or None,
            # jose skips aud/exp/iss checks when the claim is absent unless required
            options={
                "verify_aud": bool(JWT_AUDIENCE),
                "require_aud": bool(JWT_AUDIENCE),
                "require_iss": bool(JWT_ISSUER),
                "require_exp": True,
            },
        )
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise _unauthorized("Invalid or expired token")

    email = payload.get(EMAIL_CLAIM) or payload.get("email")
    if not email:
        raise _unauthorized("Token does not identify a user")
    return email


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_order_client() -> OrderClient:
    return OrderClient()


def get_cart_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    order_client: OrderClient = Depends(get_order_client),
) -> CartService:
    return CartService(
        db=db,
        order_client=order_client,
        lock_service=lock_service,
    )
