from tabletrek.models.user import User
from tabletrek.models.profile import Profile
from tabletrek.models.game_session import GameSession
from tabletrek.models.achievement import Achievement, UserAchievement
from tabletrek.models.coin_transaction import CoinTransaction

__all__ = ["User", "Profile", "GameSession", "Achievement", "UserAchievement", "CoinTransaction"]
