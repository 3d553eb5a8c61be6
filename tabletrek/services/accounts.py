"""Users, their profiles and the leaderboard."""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from tabletrek.core.errors import InvalidCredentials, NotFound, UsernameTaken
from tabletrek.core.security import hash_password, verify_password
from tabletrek.db.session import SessionFactory, run_in_transaction
from tabletrek.models.profile import Profile
from tabletrek.models.user import User

logger = logging.getLogger(__name__)


async def create_user(session_factory: SessionFactory, username: str, password: str) -> User:
    """Create the user and its zeroed profile together."""
    hashed = hash_password(password)

    async def work(db: AsyncSession) -> User:
        existing = await db.scalar(select(User.id).where(User.username == username))
        if existing is not None:
            raise UsernameTaken()
        user = User(username=username, hashed_password=hashed)
        db.add(user)
        await db.flush()
        db.add(
            Profile(
                user_id=user.id,
                total_coins=0,
                games_played=0,
                total_correct_answers=0,
                total_questions=0,
                current_streak=0,
                highest_streak=0,
            )
        )
        await db.flush()
        await db.refresh(user)
        return user

    try:
        user = await run_in_transaction(session_factory, work)
    except IntegrityError as exc:
        # lost a race with a concurrent signup for the same name
        raise UsernameTaken() from exc
    logger.info("Created user %s (%s)", user.id, username)
    return user


async def get_user(session_factory: SessionFactory, user_id: int) -> User | None:
    async def work(db: AsyncSession) -> User | None:
        return await db.get(User, user_id)

    return await run_in_transaction(session_factory, work)


async def authenticate(session_factory: SessionFactory, username: str, password: str) -> User:
    async def work(db: AsyncSession) -> User | None:
        return await db.scalar(select(User).where(User.username == username.strip()))

    user = await run_in_transaction(session_factory, work)
    if user is None or not verify_password(password, user.hashed_password):
        raise InvalidCredentials()
    return user


async def get_profile(session_factory: SessionFactory, user_id: int) -> Profile:
    async def work(db: AsyncSession) -> Profile | None:
        return await db.scalar(select(Profile).where(Profile.user_id == user_id))

    profile = await run_in_transaction(session_factory, work)
    if profile is None:
        raise NotFound("Profile not found")
    return profile


async def get_leaderboard(session_factory: SessionFactory, limit: int = 10) -> list[Profile]:
    """Profiles (with their user loaded) by coins, richest first. Read-only."""

    async def work(db: AsyncSession) -> list[Profile]:
        result = await db.execute(
            select(Profile)
            .options(joinedload(Profile.user))
            .order_by(Profile.total_coins.desc(), Profile.id.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    return await run_in_transaction(session_factory, work)
