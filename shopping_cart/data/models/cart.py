# shopping_cart/data/models/cart.py
import uuid

from sqlalchemy import Column, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import relationship

from shopping_cart.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
        lazy="selectin",
    )

    # at most one Active cart per user
    __table_args__ = (
        Index(
            "uq_carts_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'Active'"),
            sqlite_where=text("status = 'Active'"),
        ),
    )
