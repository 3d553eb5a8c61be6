"""Pydantic schemas for the achievement catalog and unlocks."""
from datetime import datetime

from pydantic import BaseModel


class AchievementOutSchema(BaseModel):
    id: int
    name: str
    description: str
    icon: str
    coin_reward: int
    requirement: int
    category: str

    class Config:
        from_attributes = True


class UserAchievementOutSchema(BaseModel):
    id: int
    user_id: int
    achievement_id: int
    unlocked_at: datetime
    achievement: AchievementOutSchema

    class Config:
        from_attributes = True
