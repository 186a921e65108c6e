"""SQLAlchemy ORM model for user profiles."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from agency_admin.infrastructure.database.base import Base, TimestampMixin


class ProfileModel(TimestampMixin, Base):
    """ORM model — maps to the 'profiles' table."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user", index=True)

    def __repr__(self) -> str:
        return f"<ProfileModel(id={self.id}, email='{self.email}', role='{self.role}')>"
