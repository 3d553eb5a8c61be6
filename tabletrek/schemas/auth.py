"""Pydantic schemas for signup / login."""
import re

from pydantic import BaseModel, Field, field_validator

from tabletrek.schemas.achievement import UserAchievementOutSchema
from tabletrek.schemas.profile import ProfileOutSchema, UserOutSchema

USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]{3,30}$")


class CredentialsSchema(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupSchema(CredentialsSchema):
    @field_validator("username")
    @classmethod
    def username_format(cls, v: str) -> str:
        v = v.strip()
        if not USERNAME_RE.match(v):
            raise ValueError("username must be 3-30 letters, digits, '_', '.' or '-'")
        return v

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("password must be at least 8 characters")
        # bcrypt hard limit: 72 bytes (UTF-8)
        if len(v.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return v


class SessionOutSchema(BaseModel):
    user: UserOutSchema
    profile: ProfileOutSchema
    achievements: list[UserAchievementOutSchema]
    access_token: str | None = None
    token_type: str | None = None
