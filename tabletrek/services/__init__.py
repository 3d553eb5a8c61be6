from tabletrek.services.accounts import create_user, authenticate, get_leaderboard, get_profile, get_user
from tabletrek.services.achievements import evaluate_achievements, list_catalog, list_user_achievements
from tabletrek.services.game import list_sessions, record_session
from tabletrek.services.ledger import add_coins, list_transactions, spend_coins
from tabletrek.services.seeding import seed_achievements

__all__ = [
    "create_user",
    "authenticate",
    "get_leaderboard",
    "get_profile",
    "get_user",
    "evaluate_achievements",
    "list_catalog",
    "list_user_achievements",
    "list_sessions",
    "record_session",
    "add_coins",
    "list_transactions",
    "spend_coins",
    "seed_achievements",
]
