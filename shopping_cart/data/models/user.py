import uuid

from sqlalchemy import Column, String, Uuid
from shopping_cart.data.database import Base


class UserModel(Base):
    """Read-only mirror of the identity service's users."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(320), nullable=False, unique=True, index=True)
