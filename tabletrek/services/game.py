"""Session recorder: store a completed round and fold it into the profile in one transaction."""
import logging

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tabletrek.core.errors import NotFound, ValidationError
from tabletrek.db.session import SessionFactory, run_in_transaction
from tabletrek.models.coin_transaction import GAME_REWARD
from tabletrek.models.game_session import GameSession
from tabletrek.models.profile import Profile
from tabletrek.services.ledger import credit_coins

logger = logging.getLogger(__name__)

DEFAULT_MODE = "standard"
MAX_MODE_LENGTH = 50


def validate_round(
    difficulty: int, questions_answered: int, correct_answers: int, coins_earned: int, mode: str
) -> None:
    if difficulty < 1:
        raise ValidationError("difficulty must be at least 1")
    if questions_answered < 0 or correct_answers < 0 or coins_earned < 0:
        raise ValidationError("counts and coins cannot be negative")
    if correct_answers > questions_answered:
        raise ValidationError("correct_answers cannot exceed questions_answered")
    if not mode or len(mode) > MAX_MODE_LENGTH:
        raise ValidationError("mode must be 1-50 characters")


def _profile_update(user_id: int, questions_answered: int, correct_answers: int):
    """UPDATE that applies one round to the counters using the row's current values."""
    values = {
        "games_played": Profile.games_played + 1,
        "total_correct_answers": Profile.total_correct_answers + correct_answers,
        "total_questions": Profile.total_questions + questions_answered,
        "updated_at": func.now(),
    }
    if correct_answers == questions_answered:
        new_streak = Profile.current_streak + correct_answers
        values["current_streak"] = new_streak
        values["highest_streak"] = case(
            (Profile.highest_streak >= new_streak, Profile.highest_streak),
            else_=new_streak,
        )
    else:
        values["current_streak"] = 0
    return (
        update(Profile)
        .where(Profile.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )


async def record_session(
    session_factory: SessionFactory,
    user_id: int,
    difficulty: int,
    questions_answered: int,
    correct_answers: int,
    coins_earned: int,
    mode: str = DEFAULT_MODE,
) -> GameSession:
    """Record a finished round.

    The session row, the profile counters, the streak and the coin reward are
    written in a single transaction; nothing is written if any step fails.
    """
    validate_round(difficulty, questions_answered, correct_answers, coins_earned, mode)

    async def work(db: AsyncSession) -> GameSession:
        result = await db.execute(_profile_update(user_id, questions_answered, correct_answers))
        if result.rowcount == 0:
            raise NotFound("Profile not found")

        game_session = GameSession(
            user_id=user_id,
            difficulty=difficulty,
            questions_answered=questions_answered,
            correct_answers=correct_answers,
            coins_earned=coins_earned,
            mode=mode,
        )
        db.add(game_session)
        await db.flush()
        await db.refresh(game_session)

        if coins_earned > 0:
            await credit_coins(
                db,
                user_id,
                coins_earned,
                GAME_REWARD,
                f"Game completed: {correct_answers}/{questions_answered} correct",
            )
        return game_session

    game_session = await run_in_transaction(session_factory, work)
    logger.info(
        "Recorded session %s for user %s: %s/%s correct, %s coins",
        game_session.id,
        user_id,
        correct_answers,
        questions_answered,
        coins_earned,
    )
    return game_session


async def list_sessions(session_factory: SessionFactory, user_id: int, limit: int = 10) -> list[GameSession]:
    """Return the user's most recent sessions, newest first."""

    async def work(db: AsyncSession) -> list[GameSession]:
        result = await db.execute(
            select(GameSession)
            .where(GameSession.user_id == user_id)
            .order_by(GameSession.completed_at.desc(), GameSession.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    return await run_in_transaction(session_factory, work)
