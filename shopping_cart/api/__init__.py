# shopping_cart/api/__init__.py
from fastapi import APIRouter
from shopping_cart.api.routers import carts

# versioned public API, health stays unversioned
api_router = APIRouter(prefix="/api/v1")
api_router.include_router(carts.router)
