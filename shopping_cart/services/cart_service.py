import uuid
from typing import List
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from shopping_cart.data.models.cart import CartModel
from shopping_cart.data.models.cart_item import CartItemModel
from shopping_cart.domain.errors import (
    CartAlreadyExistsError,
    CartNotFoundError,
    EmptyCartError,
)
from shopping_cart.domain.schemas import CartOut, CartStatus, ItemIn, OrderItem, OrderRequest, UserRead
from shopping_cart.repos.cart_repo import CartRepo
from shopping_cart.services.lock_service import LockService
from shopping_cart.services.order_client import OrderClient
from shopping_cart.services.user_service import UserService
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)

class CartService:
    """
    Cart lifecycle per user: NoActiveCart -> Active -> Cancelled | Finished.
    get is read-only, create/add_items/cancel/checkout mutate and run under
    the per-user lock. Every operation resolves the caller's email first.
    """

    def __init__(
        self,
        db: Session,
        order_client: OrderClient,
        lock_service: LockService,
    ):
        self.repo = CartRepo(db)
        self.user_service = UserService(db)
        self.order_client = order_client
        self.lock_service = lock_service

    @staticmethod
    def _build_items(items: List[ItemIn]) -> List[CartItemModel]:
        return [
            CartItemModel(
                product_id=i.product_id,
                quantity=i.quantity,
                unit_price=i.unit_price,
            )
            for i in items
        ]

    def _require_active_cart(self, user: UserRead) -> CartModel:
        cart = self.repo.get_active_cart(user.id)
        if not cart:
            raise CartNotFoundError("Cart or user not found")
        return cart

    #query
    def get_cart(self, email: str) -> CartOut | None:
        user = self.user_service.get_user(email)
        cart = self.repo.get_active_cart(user.id)
        if not cart:
            return None
        return CartOut.model_validate(cart)

    #commands
    def create_cart(self, email: str, items: List[ItemIn]) -> CartOut:
        user = self.user_service.get_user(email)

        with self.lock_service.user_lock(user.id):
            if self.repo.get_active_cart(user.id):
                logger.info(f"User {user.id} already has an active cart")
                raise CartAlreadyExistsError("User already has an active cart")

            cart = CartModel(
                id=uuid.uuid4(),
                user_id=user.id,
                status=CartStatus.ACTIVE.value,
                items=self._build_items(items),
            )

            try:
                self.repo.save(cart)
            except IntegrityError as e:
                # only a cart committed meanwhile (uq_carts_active_user) is a conflict
                if not self.repo.get_active_cart(user.id):
                    raise
                logger.warning(f"Concurrent cart creation for user {user.id}: {e}")
                raise CartAlreadyExistsError("User already has an active cart") from e

            logger.info(f"Created cart {cart.id} for user {user.id} with {len(items)} items")
            return CartOut.model_validate(cart)

    def add_items(self, email: str, items: List[ItemIn]) -> CartOut:
        """
        Replaces the whole item list of the active cart.
        Items not present in `items` are deleted (delete-orphan), nothing is merged.
        """
        user = self.user_service.get_user(email)

        with self.lock_service.user_lock(user.id):
            cart = self._require_active_cart(user)

            logger.info(
                f"Replacing items of cart {cart.id}: "
                f"{len(cart.items)} -> {len(items)}"
            )
            cart.items = self._build_items(items)
            self.repo.save(cart)

            return CartOut.model_validate(cart)

    def cancel_cart(self, email: str) -> CartOut:
        user = self.user_service.get_user(email)

        with self.lock_service.user_lock(user.id):
            cart = self._require_active_cart(user)

            cart.status = CartStatus.CANCELLED.value
            self.repo.save(cart)

            logger.info(f"Cart {cart.id} cancelled")
            return CartOut.model_validate(cart)

    def checkout_cart(self, email: str) -> CartOut:
        """
        Sends the cart to the order service and marks it Finished.
        The cart stays Active when the order service refuses the order.
        """
        user = self.user_service.get_user(email)

        with self.lock_service.user_lock(user.id):
            cart = self._require_active_cart(user)

            if not cart.items:
                raise EmptyCartError("It was not possible to create an order from an empty cart")

            order = OrderRequest(
                user_id=user.id,
                items=[OrderItem.model_validate(i) for i in cart.items],
            )
            self.order_client.create_order(order)

            cart_id = cart.id
            cart.status = CartStatus.FINISHED.value
            try:
                self.repo.save(cart)
            except SQLAlchemyError:
                # the order already exists downstream, the cart is still Active
                logger.error(
                    f"Order sent but cart {cart_id} was not marked Finished, "
                    f"reconcile order {order.model_dump_json(by_alias=True)}"
                )
                raise

            logger.info(f"Cart {cart.id} checked out")
            return CartOut.model_validate(cart)
