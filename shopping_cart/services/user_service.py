from sqlalchemy.orm import Session
from shopping_cart.repos.user_repo import UserRepo
from shopping_cart.domain.errors import UserNotFoundError
from shopping_cart.domain.schemas import UserRead


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def get_user(self, email: str) -> UserRead:
        user = self.repo.get_user_by_email(email)
        if not user:
            raise UserNotFoundError("User not found")
        return UserRead(id=user.id, email=user.email)
