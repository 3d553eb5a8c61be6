"""User account: unique username and bcrypt hash."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from tabletrek.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(30), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    game_sessions = relationship(
        "GameSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    achievements = relationship(
        "UserAchievement", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    coin_transactions = relationship(
        "CoinTransaction", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
