# truekind/services/user_service.py
from sqlalchemy.orm import Session

from truekind.data.models.user import UserModel
from truekind.domain.errors import NotFound
from truekind.domain.schemas.blog import AuthorOut
from truekind.domain.schemas.common import SessionUser
from truekind.domain.states import USER_ROLES
from truekind.repos.user_repo import UserRepo
from truekind.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def sync_session_user(self, data: dict) -> SessionUser:
        """Mirror the auth service user locally, creating it on first sight."""
        role = data.get("role") if data.get("role") in USER_ROLES else "user"
        user = SessionUser(
            id=str(data["id"]),
            name=data.get("name") or data.get("email") or "",
            email=data.get("email") or "",
            image=data.get("image"),
            role=role,
        )

        existing = self.repo.get_user(user.id)
        if not existing:
            self.repo.create_user(
                UserModel(id=user.id, name=user.name, email=user.email, image=user.image, role=user.role)
            )
            logger.info(f"User {user.id} registered from session")
            return user

        changes = {
            key: value
            for key, value in user.model_dump(include={"name", "email", "image", "role"}).items()
            if getattr(existing, key) != value
        }
        if changes:
            self.repo.update(existing, changes)
        return user

    def get_author(self, user_id: str) -> AuthorOut:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("Author not found", "AUTHOR_NOT_FOUND")
        return self.author_view(user, include_email=True)

    def author_view(self, user: UserModel, include_email: bool = False) -> AuthorOut:
        profile = self.repo.get_profile(user.id)
        return AuthorOut(
            id=user.id,
            name=user.name,
            email=user.email if include_email else None,
            image=user.image,
            bio=profile.bio if profile else None,
            avatar=profile.avatar if profile else None,
            social_links=profile.social_links if profile and profile.social_links else {},
        )
