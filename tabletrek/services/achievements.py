"""Achievement evaluation: compare a profile and its recent sessions against the catalog.

Each category maps to one predicate. ``speed`` and ``daily_streak`` are proxies
over existing counters: no answer timing or per-day activity is stored.
"""
import enum
import logging
from typing import Callable, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from tabletrek.db.session import SessionFactory, run_in_transaction
from tabletrek.models.achievement import Achievement, UserAchievement
from tabletrek.models.coin_transaction import ACHIEVEMENT
from tabletrek.models.game_session import GameSession
from tabletrek.models.profile import Profile
from tabletrek.services.ledger import credit_coins

logger = logging.getLogger(__name__)

PERFECT_GAME_MIN_QUESTIONS = 10
CONSISTENT_ACCURACY = 0.8


class AchievementCategory(str, enum.Enum):
    GAMES = "games"
    COINS = "coins"
    STREAK = "streak"
    ACCURACY = "accuracy"
    DIFFICULTY = "difficulty"
    SPEED = "speed"
    PERFECT_GAME = "perfect_game"
    CONSISTENCY = "consistency"
    DAILY_STREAK = "daily_streak"


Predicate = Callable[[Profile, Sequence[GameSession], int], bool]


def accuracy_percentage(correct: int, total: int) -> float:
    """Return correct/total as a percentage; 0 when nothing was answered."""
    return (correct / total * 100) if total > 0 else 0.0


def _is_perfect(s: GameSession) -> bool:
    return s.questions_answered >= PERFECT_GAME_MIN_QUESTIONS and s.correct_answers == s.questions_answered


def _is_accurate(s: GameSession) -> bool:
    return s.questions_answered > 0 and s.correct_answers / s.questions_answered >= CONSISTENT_ACCURACY


def _consistency(profile: Profile, recent: Sequence[GameSession], requirement: int) -> bool:
    window = recent[:requirement]
    if len(window) < requirement:
        return False
    return all(_is_accurate(s) for s in window)


# recent is newest first
PREDICATES: dict[AchievementCategory, Predicate] = {
    AchievementCategory.GAMES: lambda p, recent, req: p.games_played >= req,
    AchievementCategory.COINS: lambda p, recent, req: p.total_coins >= req,
    AchievementCategory.STREAK: lambda p, recent, req: p.highest_streak >= req,
    AchievementCategory.ACCURACY: lambda p, recent, req: (
        accuracy_percentage(p.total_correct_answers, p.total_questions) >= req
    ),
    AchievementCategory.DIFFICULTY: lambda p, recent, req: len({s.difficulty for s in recent}) >= req,
    AchievementCategory.SPEED: lambda p, recent, req: p.total_correct_answers >= req,
    AchievementCategory.PERFECT_GAME: lambda p, recent, req: any(_is_perfect(s) for s in recent),
    AchievementCategory.CONSISTENCY: _consistency,
    AchievementCategory.DAILY_STREAK: lambda p, recent, req: p.games_played >= req,
}


def is_satisfied(achievement: Achievement, profile: Profile, recent: Sequence[GameSession]) -> bool:
    """True if the profile meets the achievement's requirement. Unknown categories never unlock."""
    try:
        category = AchievementCategory(achievement.category)
    except ValueError:
        return False
    return PREDICATES[category](profile, recent, achievement.requirement)


async def list_catalog(session_factory: SessionFactory) -> list[Achievement]:
    async def work(db: AsyncSession) -> list[Achievement]:
        result = await db.execute(select(Achievement).order_by(Achievement.id))
        return list(result.scalars().all())

    return await run_in_transaction(session_factory, work)


async def list_user_achievements(session_factory: SessionFactory, user_id: int) -> list[UserAchievement]:
    """Unlocks with their catalog entry loaded, newest first."""

    async def work(db: AsyncSession) -> list[UserAchievement]:
        result = await db.execute(
            select(UserAchievement)
            .options(joinedload(UserAchievement.achievement))
            .where(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.unlocked_at.desc(), UserAchievement.id.desc())
        )
        return list(result.scalars().all())

    return await run_in_transaction(session_factory, work)


async def unlock_achievement(
    session_factory: SessionFactory, user_id: int, achievement: Achievement
) -> UserAchievement | None:
    """Record the unlock and pay its reward in one transaction.

    Returns None when the pair is already unlocked (the unique constraint
    rejected the insert); that is not an error.
    """

    async def work(db: AsyncSession) -> UserAchievement:
        unlock = UserAchievement(user_id=user_id, achievement_id=achievement.id)
        db.add(unlock)
        await db.flush()
        await db.refresh(unlock)
        if achievement.coin_reward > 0:
            await credit_coins(db, user_id, achievement.coin_reward, ACHIEVEMENT, f"Achievement: {achievement.name}")
        return unlock

    try:
        unlock = await run_in_transaction(session_factory, work)
    except IntegrityError:
        logger.info("Achievement %s already unlocked for user %s", achievement.id, user_id)
        return None
    logger.info("User %s unlocked achievement %r (+%s coins)", user_id, achievement.name, achievement.coin_reward)
    return unlock


async def evaluate_achievements(
    session_factory: SessionFactory, user_id: int, profile: Profile, window: int
) -> list[Achievement]:
    """Unlock every locked achievement the profile now satisfies; return those unlocked by this call.

    Session-based categories only see the ``window`` most recent sessions.
    """

    async def load(db: AsyncSession):
        catalog = (await db.execute(select(Achievement).order_by(Achievement.id))).scalars().all()
        unlocked = (
            await db.execute(select(UserAchievement.achievement_id).where(UserAchievement.user_id == user_id))
        ).scalars().all()
        recent = (
            await db.execute(
                select(GameSession)
                .where(GameSession.user_id == user_id)
                .order_by(GameSession.completed_at.desc(), GameSession.id.desc())
                .limit(window)
            )
        ).scalars().all()
        return list(catalog), set(unlocked), list(recent)

    catalog, unlocked_ids, recent = await run_in_transaction(session_factory, load)

    newly_unlocked = []
    for achievement in catalog:
        if achievement.id in unlocked_ids:
            continue
        if not is_satisfied(achievement, profile, recent):
            continue
        if await unlock_achievement(session_factory, user_id, achievement) is not None:
            newly_unlocked.append(achievement)
    return newly_unlocked
