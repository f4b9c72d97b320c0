"""ORM model for roster players."""

from sqlalchemy import Column, Integer, String

from roster.models.base import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    position = Column(String(64), nullable=False, default="")
    age = Column(Integer, nullable=False, default=0)
    goals = Column(Integer, nullable=False, default=0)
