"""Pydantic schemas for completed rounds."""
from datetime import datetime

from pydantic import BaseModel, Field

from tabletrek.schemas.achievement import AchievementOutSchema
from tabletrek.schemas.profile import ProfileOutSchema


class GameCompleteSchema(BaseModel):
    difficulty: int = Field(ge=1)
    questions_answered: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    coins_earned: int = Field(ge=0)
    game_mode: str = Field(default="standard", min_length=1, max_length=50)


class GameSessionOutSchema(BaseModel):
    id: int
    user_id: int
    difficulty: int
    questions_answered: int
    correct_answers: int
    coins_earned: int
    mode: str
    completed_at: datetime

    class Config:
        from_attributes = True


class GameCompleteOutSchema(BaseModel):
    game_session: GameSessionOutSchema
    profile: ProfileOutSchema
    new_achievements: list[AchievementOutSchema]
