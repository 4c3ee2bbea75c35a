from typing import Optional

from sqlalchemy.orm import Session

from app.api.profile.models import User
from app.core.exceptions import UserNotFound


class ProfileService:
    def __init__(self, db: Session):
        self.db = db

    def find_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user(self, user_id: str) -> User:
        user = self.find_user(user_id)
        if not user:
            raise UserNotFound()
        return user
