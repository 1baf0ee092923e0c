# storefront/repos/user_repo.py
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_or_raise(self, user_id: int) -> UserModel:
        """Koszyki i feedback wskazuja na users.id - nieznany user to 404, nie blad FK."""
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def add_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
