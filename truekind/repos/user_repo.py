# truekind/repos/user_repo.py
from sqlalchemy import select

from truekind.data.models.user import AuthorProfileModel, UserModel
from truekind.repos.base import BaseRepo


class UserRepo(BaseRepo):
    model = UserModel
    label = "User"
    unique_codes = {"id": "DUPLICATE_USER"}

    def get_user(self, user_id: str) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def create_user(self, user: UserModel) -> UserModel:
        return self.add(user)

    def get_profile(self, user_id: str) -> AuthorProfileModel | None:
        return self.db.execute(
            select(AuthorProfileModel).where(AuthorProfileModel.user_id == user_id)
        ).scalar_one_or_none()
