"""SQLAlchemy declarative base and model imports for Alembic."""
from tabletrek.db.session import Base

# Import all models so Alembic can see them
from tabletrek.models.achievement import Achievement, UserAchievement  # noqa: F401
from tabletrek.models.coin_transaction import CoinTransaction  # noqa: F401
from tabletrek.models.game_session import GameSession  # noqa: F401
from tabletrek.models.profile import Profile  # noqa: F401
from tabletrek.models.user import User  # noqa: F401

__all__ = ["Base", "User", "Profile", "GameSession", "Achievement", "UserAchievement", "CoinTransaction"]
