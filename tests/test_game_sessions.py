import pytest
from sqlalchemy import func, select

from tabletrek.core.config import Settings
from tabletrek.core.errors import NotFound, StorageUnavailable, ValidationError
from tabletrek.db.session import create_engine, create_session_factory
from tabletrek.models.coin_transaction import CoinTransaction
from tabletrek.models.game_session import GameSession
from tabletrek.services.accounts import get_profile
from tabletrek.services.game import list_sessions, record_session
from tabletrek.services.ledger import ledger_balance, list_transactions


async def _count(session_factory, model):
    async with session_factory() as db:
        return await db.scalar(select(func.count()).select_from(model))


async def test_clean_first_round_updates_every_counter(session_factory, user):
    game_session = await record_session(session_factory, user.id, 2, 10, 10, 10)

    assert game_session.id is not None
    assert game_session.mode == "standard"
    assert game_session.completed_at is not None

    profile = await get_profile(session_factory, user.id)
    assert profile.games_played == 1
    assert profile.total_correct_answers == 10
    assert profile.total_questions == 10
    assert profile.current_streak == 10
    assert profile.highest_streak == 10
    assert profile.total_coins == 10

    [transaction] = await list_transactions(session_factory, user.id)
    assert transaction.amount == 10
    assert transaction.type == "game_reward"
    assert transaction.description == "Game completed: 10/10 correct"


async def test_failed_round_resets_streak_but_keeps_best(session_factory, user):
    await record_session(session_factory, user.id, 2, 10, 10, 10)
    await record_session(session_factory, user.id, 2, 10, 0, 0)

    profile = await get_profile(session_factory, user.id)
    assert profile.highest_streak == 10
    assert profile.current_streak == 0
    assert profile.games_played == 2
    assert profile.total_questions == 20
    assert profile.total_correct_answers == 10


async def test_streak_runs_across_clean_rounds(session_factory, user):
    best = []
    for questions, correct in [(5, 5), (5, 5), (4, 3), (2, 2), (12, 12)]:
        await record_session(session_factory, user.id, 1, questions, correct, 0)
        best.append((await get_profile(session_factory, user.id)).highest_streak)

    assert best == [5, 10, 10, 10, 14]
    profile = await get_profile(session_factory, user.id)
    assert profile.current_streak == 14


async def test_totals_and_coins_match_the_recorded_rounds(session_factory, user):
    rounds = [(10, 7, 7), (8, 8, 12), (15, 3, 0), (20, 19, 25)]
    for questions, correct, coins in rounds:
        await record_session(session_factory, user.id, 3, questions, correct, coins)

    profile = await get_profile(session_factory, user.id)
    assert profile.games_played == len(rounds)
    assert profile.total_questions == sum(r[0] for r in rounds)
    assert profile.total_correct_answers == sum(r[1] for r in rounds)
    assert profile.total_coins == sum(r[2] for r in rounds)
    assert await ledger_balance(session_factory, user.id) == profile.total_coins
    # no transaction for the zero-coin round
    assert await _count(session_factory, CoinTransaction) == 3


@pytest.mark.parametrize(
    "difficulty, questions, correct, coins",
    [
        (1, 5, 6, 0),
        (1, 5, 5, -1),
        (1, -1, 0, 0),
        (0, 5, 5, 5),
    ],
)
async def test_invalid_round_is_rejected_before_writing(session_factory, user, difficulty, questions, correct, coins):
    with pytest.raises(ValidationError):
        await record_session(session_factory, user.id, difficulty, questions, correct, coins)

    profile = await get_profile(session_factory, user.id)
    assert profile.games_played == 0
    assert await _count(session_factory, GameSession) == 0


async def test_unknown_user_writes_nothing(session_factory):
    with pytest.raises(NotFound):
        await record_session(session_factory, 999, 1, 10, 10, 10)

    assert await _count(session_factory, GameSession) == 0
    assert await _count(session_factory, CoinTransaction) == 0


async def test_list_sessions_is_newest_first(session_factory, user):
    for difficulty in (1, 2, 3):
        await record_session(session_factory, user.id, difficulty, 10, 5, 0, mode="timed")

    sessions = await list_sessions(session_factory, user.id, limit=2)
    assert [s.difficulty for s in sessions] == [3, 2]
    assert all(s.mode == "timed" for s in sessions)


async def test_unreachable_database_is_reported(tmp_path):
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'db.sqlite'}")
    engine = create_engine(settings)
    try:
        with pytest.raises(StorageUnavailable):
            await record_session(create_session_factory(engine), 1, 1, 10, 10, 10)
    finally:
        await engine.dispose()
