"""Profile model: one per user. Cumulative counters and the coin balance."""
from sqlalchemy import CheckConstraint, Column, Integer, ForeignKey, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from tabletrek.db.session import Base


class Profile(Base):
    __tablename__ = "user_profiles"
    __table_args__ = (CheckConstraint("total_coins >= 0", name="ck_user_profiles_total_coins"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # always equal to the sum of the user's coin_transactions
    total_coins = Column(Integer, nullable=False, default=0)
    games_played = Column(Integer, nullable=False, default=0)
    total_correct_answers = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False, default=0)
    current_streak = Column(Integer, nullable=False, default=0)  # correct answers in consecutive clean rounds
    highest_streak = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="profile")
