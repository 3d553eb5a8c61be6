"""API routes: JSON for profile, game sessions, achievements, coins and leaderboard."""
from typing import Annotated

from fastapi import APIRouter, Query

from tabletrek.core.config import Settings
from tabletrek.db.session import SessionFactoryDep
from tabletrek.routers.auth import CurrentUser, SettingsDep
from tabletrek.schemas.achievement import AchievementOutSchema, UserAchievementOutSchema
from tabletrek.schemas.coins import CoinTransactionOutSchema, SpendCoinsOutSchema, SpendCoinsSchema
from tabletrek.schemas.game import GameCompleteOutSchema, GameCompleteSchema, GameSessionOutSchema
from tabletrek.schemas.profile import LeaderboardEntrySchema, ProfileOutSchema
from tabletrek.services.accounts import get_leaderboard, get_profile
from tabletrek.services.achievements import evaluate_achievements, list_catalog, list_user_achievements
from tabletrek.services.game import list_sessions, record_session
from tabletrek.services.ledger import list_transactions, spend_coins

router = APIRouter(prefix="/api", tags=["api"])

LimitQuery = Annotated[int | None, Query(ge=1)]


def _page_size(settings: Settings, limit: int | None) -> int:
    if limit is None:
        return settings.default_page_size
    return min(limit, settings.max_page_size)


@router.get("/profile", response_model=ProfileOutSchema)
async def read_profile(current_user: CurrentUser, session_factory: SessionFactoryDep):
    return ProfileOutSchema.model_validate(await get_profile(session_factory, current_user.id))


@router.post("/game/complete", response_model=GameCompleteOutSchema)
async def complete_game(
    body: GameCompleteSchema,
    current_user: CurrentUser,
    session_factory: SessionFactoryDep,
    settings: SettingsDep,
):
    """Record a finished round, then unlock whatever achievements it earned."""
    game_session = await record_session(
        session_factory,
        current_user.id,
        difficulty=body.difficulty,
        questions_answered=body.questions_answered,
        correct_answers=body.correct_answers,
        coins_earned=body.coins_earned,
        mode=body.game_mode,
    )
    profile = await get_profile(session_factory, current_user.id)
    new_achievements = await evaluate_achievements(
        session_factory, current_user.id, profile, window=settings.recent_session_window
    )
    if new_achievements:
        # rewards changed the balance
        profile = await get_profile(session_factory, current_user.id)

    return GameCompleteOutSchema(
        game_session=GameSessionOutSchema.model_validate(game_session),
        profile=ProfileOutSchema.model_validate(profile),
        new_achievements=[AchievementOutSchema.model_validate(a) for a in new_achievements],
    )


@router.get("/game/sessions", response_model=list[GameSessionOutSchema])
async def read_sessions(
    current_user: CurrentUser,
    session_factory: SessionFactoryDep,
    settings: SettingsDep,
    limit: LimitQuery = None,
):
    sessions = await list_sessions(session_factory, current_user.id, _page_size(settings, limit))
    return [GameSessionOutSchema.model_validate(s) for s in sessions]


@router.get("/achievements", response_model=list[AchievementOutSchema])
async def read_catalog(current_user: CurrentUser, session_factory: SessionFactoryDep):
    return [AchievementOutSchema.model_validate(a) for a in await list_catalog(session_factory)]


@router.get("/achievements/user", response_model=list[UserAchievementOutSchema])
async def read_user_achievements(current_user: CurrentUser, session_factory: SessionFactoryDep):
    unlocks = await list_user_achievements(session_factory, current_user.id)
    return [UserAchievementOutSchema.model_validate(u) for u in unlocks]


@router.post("/coins/spend", response_model=SpendCoinsOutSchema)
async def spend(body: SpendCoinsSchema, current_user: CurrentUser, session_factory: SessionFactoryDep):
    transaction = await spend_coins(session_factory, current_user.id, body.amount, body.description)
    profile = await get_profile(session_factory, current_user.id)
    return SpendCoinsOutSchema(
        transaction=CoinTransactionOutSchema.model_validate(transaction),
        profile=ProfileOutSchema.model_validate(profile),
    )


@router.get("/coins/transactions", response_model=list[CoinTransactionOutSchema])
async def read_transactions(
    current_user: CurrentUser,
    session_factory: SessionFactoryDep,
    settings: SettingsDep,
    limit: LimitQuery = None,
):
    transactions = await list_transactions(session_factory, current_user.id, _page_size(settings, limit))
    return [CoinTransactionOutSchema.model_validate(t) for t in transactions]


@router.get("/leaderboard", response_model=list[LeaderboardEntrySchema])
async def read_leaderboard(session_factory: SessionFactoryDep, settings: SettingsDep, limit: LimitQuery = None):
    """Public: top profiles by coins."""
    profiles = await get_leaderboard(session_factory, _page_size(settings, limit))
    return [
        LeaderboardEntrySchema(
            rank=rank,
            username=p.user.username,
            total_coins=p.total_coins,
            games_played=p.games_played,
            total_correct_answers=p.total_correct_answers,
            total_questions=p.total_questions,
            highest_streak=p.highest_streak,
        )
        for rank, p in enumerate(profiles, start=1)
    ]
