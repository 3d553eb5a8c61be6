import asyncio

import pytest

from tabletrek.models.achievement import Achievement
from tabletrek.models.game_session import GameSession
from tabletrek.models.profile import Profile
from tabletrek.services.accounts import get_profile
from tabletrek.services.achievements import (
    is_satisfied,
    list_catalog,
    list_user_achievements,
    unlock_achievement,
)
from tabletrek.services.game import record_session
from tabletrek.services.ledger import ledger_balance, list_transactions
from tabletrek.services.seeding import ACHIEVEMENT_CATALOG, seed_achievements


def _profile(**counters):
    values = dict(
        total_coins=0, games_played=0, total_correct_answers=0, total_questions=0, current_streak=0, highest_streak=0
    )
    values.update(counters)
    return Profile(user_id=1, **values)


def _round(questions, correct, difficulty=1):
    return GameSession(user_id=1, difficulty=difficulty, questions_answered=questions, correct_answers=correct)


def _achievement(category, requirement):
    return Achievement(name=category, description="", icon="x", coin_reward=0, requirement=requirement, category=category)


async def test_first_game_unlocks_and_pays_reward(session_factory, user, seed, evaluate):
    await seed(("First Steps", "Complete your first game", "trophy", 5, 1, "games"))
    await record_session(session_factory, user.id, 1, 10, 10, 10)
    profile = await get_profile(session_factory, user.id)

    unlocked = await evaluate(user.id, profile)

    assert [a.name for a in unlocked] == ["First Steps"]
    profile = await get_profile(session_factory, user.id)
    assert profile.total_coins == 15
    assert await ledger_balance(session_factory, user.id) == 15
    reward = (await list_transactions(session_factory, user.id))[0]
    assert (reward.amount, reward.type, reward.description) == (5, "achievement", "Achievement: First Steps")


async def test_second_evaluation_unlocks_nothing(session_factory, user, seed, evaluate):
    await seed(
        ("First Steps", "", "trophy", 5, 1, "games"),
        ("Hot Streak", "", "zap", 15, 10, "streak"),
    )
    await record_session(session_factory, user.id, 1, 10, 10, 10)
    profile = await get_profile(session_factory, user.id)

    first = await evaluate(user.id, profile)
    second = await evaluate(user.id, profile)

    assert len(first) == 2
    assert second == []
    assert len(await list_user_achievements(session_factory, user.id)) == 2
    assert (await get_profile(session_factory, user.id)).total_coins == 30


async def test_unmet_requirements_stay_locked(session_factory, user, seed, evaluate):
    await seed(("Getting Started", "", "trophy", 25, 5, "games"))
    await record_session(session_factory, user.id, 1, 10, 10, 0)
    profile = await get_profile(session_factory, user.id)

    assert await evaluate(user.id, profile) == []


async def test_repeated_unlock_is_a_no_op(session_factory, user, seed):
    await seed(("Sharp Shooter", "", "target", 30, 80, "accuracy"))
    [achievement] = await list_catalog(session_factory)

    first = await unlock_achievement(session_factory, user.id, achievement)
    second = await unlock_achievement(session_factory, user.id, achievement)

    assert first is not None
    assert second is None
    assert (await get_profile(session_factory, user.id)).total_coins == 30
    assert len(await list_transactions(session_factory, user.id)) == 1


async def test_concurrent_unlocks_pay_once(session_factory, user, seed):
    await seed(("Sharp Shooter", "", "target", 30, 80, "accuracy"))
    [achievement] = await list_catalog(session_factory)

    results = await asyncio.gather(
        unlock_achievement(session_factory, user.id, achievement),
        unlock_achievement(session_factory, user.id, achievement),
    )

    assert sum(r is not None for r in results) == 1
    assert (await get_profile(session_factory, user.id)).total_coins == 30


async def test_user_achievements_carry_catalog_entry(session_factory, user, seed, evaluate):
    await seed(("First Steps", "Complete your first game", "trophy", 0, 1, "games"))
    await record_session(session_factory, user.id, 1, 3, 1, 0)
    await evaluate(user.id, await get_profile(session_factory, user.id))

    [unlock] = await list_user_achievements(session_factory, user.id)
    assert unlock.achievement.name == "First Steps"
    # no reward, no transaction
    assert await list_transactions(session_factory, user.id) == []


async def test_difficulty_counts_distinct_levels_in_window(session_factory, user, seed, evaluate):
    await seed(("Explorer", "", "crown", 30, 3, "difficulty"))
    for difficulty in (2, 2, 5):
        await record_session(session_factory, user.id, difficulty, 10, 5, 0)
    profile = await get_profile(session_factory, user.id)
    assert await evaluate(user.id, profile) == []

    await record_session(session_factory, user.id, 7, 10, 5, 0)
    profile = await get_profile(session_factory, user.id)
    assert [a.name for a in await evaluate(user.id, profile)] == ["Explorer"]


async def test_consistency_looks_at_most_recent_rounds(session_factory, user, seed, evaluate):
    await seed(("Steady Hands", "", "award", 50, 3, "consistency"))
    for questions, correct in [(10, 2), (10, 8), (10, 9)]:
        await record_session(session_factory, user.id, 1, questions, correct, 0)
    profile = await get_profile(session_factory, user.id)
    assert await evaluate(user.id, profile) == []

    await record_session(session_factory, user.id, 1, 5, 4, 0)
    profile = await get_profile(session_factory, user.id)
    assert len(await evaluate(user.id, profile)) == 1


async def test_sessions_outside_the_window_are_ignored(session_factory, user, seed, evaluate):
    await seed(
        ("Explorer", "", "crown", 0, 3, "difficulty"),
        ("Perfect Round", "", "star", 0, 1, "perfect_game"),
    )
    # oldest round is the only perfect one and the only one at difficulty 9
    await record_session(session_factory, user.id, 9, 10, 10, 0)
    await record_session(session_factory, user.id, 1, 10, 5, 0)
    await record_session(session_factory, user.id, 2, 10, 5, 0)
    profile = await get_profile(session_factory, user.id)

    assert await evaluate(user.id, profile, window=2) == []

    unlocked = await evaluate(user.id, profile, window=3)
    assert {a.name for a in unlocked} == {"Explorer", "Perfect Round"}


def test_accuracy_is_zero_without_questions():
    assert not is_satisfied(_achievement("accuracy", 1), _profile(), [])
    assert is_satisfied(_achievement("accuracy", 75), _profile(total_correct_answers=3, total_questions=4), [])
    assert not is_satisfied(_achievement("accuracy", 76), _profile(total_correct_answers=3, total_questions=4), [])


def test_perfect_game_needs_ten_questions():
    assert not is_satisfied(_achievement("perfect_game", 1), _profile(), [_round(9, 9)])
    assert not is_satisfied(_achievement("perfect_game", 1), _profile(), [_round(12, 11)])
    assert is_satisfied(_achievement("perfect_game", 1), _profile(), [_round(12, 11), _round(10, 10)])


def test_consistency_requires_enough_rounds():
    two_good = [_round(10, 9), _round(10, 8)]
    assert not is_satisfied(_achievement("consistency", 3), _profile(), two_good)
    assert is_satisfied(_achievement("consistency", 2), _profile(), two_good)
    assert not is_satisfied(_achievement("consistency", 2), _profile(), [_round(0, 0), _round(10, 10)])


def test_speed_and_daily_streak_are_counter_proxies():
    profile = _profile(total_correct_answers=50, games_played=7)
    assert is_satisfied(_achievement("speed", 50), profile, [])
    assert not is_satisfied(_achievement("speed", 51), profile, [])
    assert is_satisfied(_achievement("daily_streak", 7), profile, [])
    assert not is_satisfied(_achievement("daily_streak", 8), profile, [])


def test_unknown_category_never_unlocks():
    assert not is_satisfied(_achievement("time_travel", 0), _profile(games_played=100), [])


async def test_default_catalog_covers_every_category(session_factory):
    assert await seed_achievements(session_factory) == len(ACHIEVEMENT_CATALOG)
    # seeding again adds nothing
    assert await seed_achievements(session_factory) == 0

    catalog = await list_catalog(session_factory)
    assert {a.category for a in catalog} == {
        "games",
        "coins",
        "streak",
        "accuracy",
        "difficulty",
        "speed",
        "perfect_game",
        "consistency",
        "daily_streak",
    }


@pytest.mark.parametrize("requirement, expected", [(10, True), (11, False)])
def test_streak_uses_highest_streak(requirement, expected):
    profile = _profile(current_streak=0, highest_streak=10)
    assert is_satisfied(_achievement("streak", requirement), profile, []) is expected
