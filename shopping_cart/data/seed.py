# shopping_cart/data/seed.py
"""Insert mirror users for local development: python -m shopping_cart.data.seed a@x.com b@x.com"""
import sys
import uuid

from shopping_cart.data.database import Base, SessionLocal, engine
from shopping_cart.data.models import UserModel
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)


def seed(emails):
    db = SessionLocal()
    try:
        for email in emails:
            # not forcing: skip users that already exist
            if db.query(UserModel).filter(UserModel.email == email).first():
                continue
            db.add(UserModel(id=uuid.uuid4(), email=email))
            logger.info(f"Seeded user {email}")
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed(sys.argv[1:] or ["a@x.com"])
