"""Coin ledger: every balance change is a signed transaction plus an atomic counter update."""
import logging

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tabletrek.core.errors import InsufficientFunds, NotFound, ValidationError
from tabletrek.db.session import SessionFactory, run_in_transaction
from tabletrek.models.coin_transaction import SHOP_PURCHASE, CoinTransaction
from tabletrek.models.profile import Profile

logger = logging.getLogger(__name__)


async def _append_transaction(
    db: AsyncSession, user_id: int, amount: int, type_: str, description: str
) -> CoinTransaction:
    transaction = CoinTransaction(user_id=user_id, amount=amount, type=type_, description=description)
    db.add(transaction)
    await db.flush()
    await db.refresh(transaction)
    return transaction


async def credit_coins(
    db: AsyncSession, user_id: int, amount: int, type_: str, description: str
) -> CoinTransaction:
    """Append a transaction and add ``amount`` to the balance inside the caller's transaction."""
    result = await db.execute(
        update(Profile)
        .where(Profile.user_id == user_id)
        .values(total_coins=Profile.total_coins + amount, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFound("Profile not found")
    return await _append_transaction(db, user_id, amount, type_, description)


async def add_coins(
    session_factory: SessionFactory, user_id: int, amount: int, type_: str, description: str
) -> CoinTransaction:
    async def work(db: AsyncSession) -> CoinTransaction:
        return await credit_coins(db, user_id, amount, type_, description)

    return await run_in_transaction(session_factory, work)


async def spend_coins(
    session_factory: SessionFactory, user_id: int, amount: int, description: str
) -> CoinTransaction:
    """Debit ``amount`` if the balance covers it.

    The balance check and the decrement are one conditional UPDATE, so two
    concurrent spends can never both pass against the same stale balance.
    """
    if amount <= 0:
        raise ValidationError("Amount must be positive")
    if not description or not description.strip():
        raise ValidationError("Description is required")

    async def work(db: AsyncSession) -> CoinTransaction:
        result = await db.execute(
            update(Profile)
            .where(Profile.user_id == user_id, Profile.total_coins >= amount)
            .values(total_coins=Profile.total_coins - amount, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            profile_id = await db.scalar(select(Profile.id).where(Profile.user_id == user_id))
            if profile_id is None:
                raise NotFound("Profile not found")
            logger.info("Spend of %s coins rejected for user %s: insufficient balance", amount, user_id)
            raise InsufficientFunds()
        return await _append_transaction(db, user_id, -amount, SHOP_PURCHASE, description.strip())

    return await run_in_transaction(session_factory, work)


async def list_transactions(session_factory: SessionFactory, user_id: int, limit: int = 10) -> list[CoinTransaction]:
    """Return the user's most recent transactions, newest first."""

    async def work(db: AsyncSession) -> list[CoinTransaction]:
        result = await db.execute(
            select(CoinTransaction)
            .where(CoinTransaction.user_id == user_id)
            .order_by(CoinTransaction.created_at.desc(), CoinTransaction.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    return await run_in_transaction(session_factory, work)


async def ledger_balance(session_factory: SessionFactory, user_id: int) -> int:
    """Sum of all transaction amounts for the user; equals Profile.total_coins."""

    async def work(db: AsyncSession) -> int:
        total = await db.scalar(
            select(func.coalesce(func.sum(CoinTransaction.amount), 0)).where(CoinTransaction.user_id == user_id)
        )
        return int(total)

    return await run_in_transaction(session_factory, work)
