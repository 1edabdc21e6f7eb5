# shopping_cart/repos/cart_repo.py
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopping_cart.data.models.cart import CartModel
from shopping_cart.domain.schemas import CartStatus


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_active_cart(self, user_id: uuid.UUID) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(
                CartModel.user_id == user_id,
                CartModel.status == CartStatus.ACTIVE.value,
            )
        ).scalar_one_or_none()

    def save(self, cart: CartModel) -> CartModel:
        # cart and its item list are committed as one transaction
        self.db.add(cart)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(cart)
        return cart
