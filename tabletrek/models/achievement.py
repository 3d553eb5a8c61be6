"""Achievement catalog (seed data) and per-user unlocks."""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from tabletrek.db.session import Base


class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(50), nullable=False)
    coin_reward = Column(Integer, nullable=False, default=0)
    requirement = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False)  # see services.achievements.AchievementCategory

    unlocks = relationship("UserAchievement", back_populates="achievement")


class UserAchievement(Base):
    __tablename__ = "user_achievements"
    # a second unlock of the same pair fails here; the evaluator treats that as a no-op
    __table_args__ = (UniqueConstraint("user_id", "achievement_id", name="unique_user_achievement"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    achievement_id = Column(Integer, ForeignKey("achievements.id"), nullable=False)
    unlocked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="achievements")
    achievement = relationship("Achievement", back_populates="unlocks")
