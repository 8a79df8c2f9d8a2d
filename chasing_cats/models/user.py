"""User model."""

from sqlalchemy import Column, Integer, String

from chasing_cats.database import Base
from chasing_cats.models.enums import UserRole
from chasing_cats.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.MEMBER.value)  # 'member', 'admin'

    @property
    def is_admin(self) -> bool:
        """Check if the user may use the back office."""
        return self.role == UserRole.ADMIN
