from tabletrek.schemas.achievement import AchievementOutSchema, UserAchievementOutSchema
from tabletrek.schemas.auth import CredentialsSchema, SessionOutSchema, SignupSchema
from tabletrek.schemas.coins import CoinTransactionOutSchema, SpendCoinsOutSchema, SpendCoinsSchema
from tabletrek.schemas.game import GameCompleteOutSchema, GameCompleteSchema, GameSessionOutSchema
from tabletrek.schemas.profile import LeaderboardEntrySchema, ProfileOutSchema, UserOutSchema

__all__ = [
    "AchievementOutSchema",
    "UserAchievementOutSchema",
    "CredentialsSchema",
    "SessionOutSchema",
    "SignupSchema",
    "CoinTransactionOutSchema",
    "SpendCoinsOutSchema",
    "SpendCoinsSchema",
    "GameCompleteOutSchema",
    "GameCompleteSchema",
    "GameSessionOutSchema",
    "LeaderboardEntrySchema",
    "ProfileOutSchema",
    "UserOutSchema",
]
