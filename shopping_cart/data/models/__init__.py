#import all models so SQLAlchemy registers them in Base.metadata

from shopping_cart.data.models.user import UserModel
from shopping_cart.data.models.cart import CartModel
from shopping_cart.data.models.cart_item import CartItemModel

__all__ = ["UserModel", "CartModel", "CartItemModel"]
