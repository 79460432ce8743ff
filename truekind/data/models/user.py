from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from truekind.data.database import Base
from truekind.utils.clock import utcnow


class UserModel(Base):
    """Local mirror of the auth service user, refreshed on every resolved session."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    image = Column(String(1024))
    role = Column(String(16), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    profile = relationship("AuthorProfileModel", back_populates="user", uselist=False)


class AuthorProfileModel(Base):
    __tablename__ = "author_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    bio = Column(Text)
    avatar = Column(String(1024))
    social_links = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("UserModel", back_populates="profile")
