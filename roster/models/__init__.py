"""SQLAlchemy ORM models."""

from roster.models.base import Base
from roster.models.player import Player
from roster.models.refresh_token import RefreshToken
from roster.models.user import User

__all__ = ["Base", "Player", "RefreshToken", "User"]
