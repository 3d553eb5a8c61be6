"""Pydantic schemas for users, profiles and the leaderboard."""
from datetime import datetime

from pydantic import BaseModel


class UserOutSchema(BaseModel):
    id: int
    username: str

    class Config:
        from_attributes = True


class ProfileOutSchema(BaseModel):
    user_id: int
    total_coins: int
    games_played: int
    total_correct_answers: int
    total_questions: int
    current_streak: int
    highest_streak: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LeaderboardEntrySchema(BaseModel):
    rank: int
    username: str
    total_coins: int
    games_played: int
    total_correct_answers: int
    total_questions: int
    highest_streak: int
