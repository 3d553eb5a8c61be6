"""Seed the static achievement catalog."""
import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tabletrek.db.session import SessionFactory, run_in_transaction
from tabletrek.models.achievement import Achievement

logger = logging.getLogger(__name__)

# (name, description, icon, coin_reward, requirement, category)
CatalogEntry = tuple[str, str, str, int, int, str]

ACHIEVEMENT_CATALOG: list[CatalogEntry] = [
    ("First Steps", "Complete your first game", "trophy", 10, 1, "games"),
    ("Getting Started", "Complete 5 games", "trophy", 25, 5, "games"),
    ("Dedicated Learner", "Complete 25 games", "trophy", 100, 25, "games"),
    ("Quiz Veteran", "Complete 100 games", "crown", 300, 100, "games"),
    ("Coin Collector", "Hold 100 coins", "coins", 20, 100, "coins"),
    ("Treasure Hunter", "Hold 500 coins", "coins", 50, 500, "coins"),
    ("Coin Master", "Hold 1000 coins", "gem", 100, 1000, "coins"),
    ("Hot Streak", "Reach a streak of 10 correct answers", "zap", 15, 10, "streak"),
    ("On Fire", "Reach a streak of 25 correct answers", "flame", 40, 25, "streak"),
    ("Unstoppable", "Reach a streak of 50 correct answers", "zap", 100, 50, "streak"),
    ("Sharp Shooter", "Keep overall accuracy at 80% or more", "target", 30, 80, "accuracy"),
    ("Precision Expert", "Keep overall accuracy at 95% or more", "target", 75, 95, "accuracy"),
    ("Explorer", "Play 3 different difficulty levels", "crown", 30, 3, "difficulty"),
    ("Table Master", "Play 10 different difficulty levels", "crown", 120, 10, "difficulty"),
    ("Quick Thinker", "Answer 50 questions correctly", "flame", 25, 50, "speed"),
    ("Lightning Fast", "Answer 250 questions correctly", "flame", 75, 250, "speed"),
    ("Perfect Round", "Answer every question right in a game of 10 or more", "star", 50, 1, "perfect_game"),
    ("Steady Hands", "Score 80% or more in 5 games in a row", "award", 50, 5, "consistency"),
    ("Regular", "Play 7 games", "diamond", 35, 7, "daily_streak"),
    ("Devoted", "Play 30 games", "diamond", 120, 30, "daily_streak"),
]


async def seed_achievements(
    session_factory: SessionFactory, catalog: Sequence[CatalogEntry] | None = None
) -> int:
    """Insert catalog entries whose name is not present yet. Returns how many were added."""
    entries = ACHIEVEMENT_CATALOG if catalog is None else catalog

    async def work(db: AsyncSession) -> int:
        existing = set((await db.execute(select(Achievement.name))).scalars().all())
        added = 0
        for name, description, icon, coin_reward, requirement, category in entries:
            if name in existing:
                continue
            db.add(
                Achievement(
                    name=name,
                    description=description,
                    icon=icon,
                    coin_reward=coin_reward,
                    requirement=requirement,
                    category=category,
                )
            )
            added += 1
        return added

    added = await run_in_transaction(session_factory, work)
    if added:
        logger.info("Seeded %s achievements", added)
    return added
