"""GameSession model: one completed quiz round. Never updated after insert."""
from sqlalchemy import CheckConstraint, Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from tabletrek.db.session import Base


class GameSession(Base):
    __tablename__ = "game_sessions"
    __table_args__ = (
        CheckConstraint("correct_answers <= questions_answered", name="ck_game_sessions_correct_le_questions"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    difficulty = Column(Integer, nullable=False)
    questions_answered = Column(Integer, nullable=False)
    correct_answers = Column(Integer, nullable=False)
    coins_earned = Column(Integer, nullable=False)
    mode = Column(String(50), nullable=False, default="standard")
    completed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User", back_populates="game_sessions")
