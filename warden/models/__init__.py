"""SQLAlchemy ORM models."""

from warden.models.base import Base
from warden.models.user import User

__all__ = ["Base", "User"]
