"""Async engine, session factory and the unit-of-work helper.

The engine is built once per process (see ``tabletrek.main.lifespan``) and the
session factory is handed to every service call; nothing here is global.
"""
import logging
from typing import Annotated, Awaitable, Callable, TypeVar

from fastapi import Depends, Request
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from tabletrek.core.config import Settings
from tabletrek.core.errors import StorageUnavailable, TransactionFailed

logger = logging.getLogger(__name__)

Base = declarative_base()

T = TypeVar("T")

SessionFactory = async_sessionmaker[AsyncSession]


def create_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(settings.database_url, echo=settings.echo_sql)
    if engine.dialect.name == "sqlite":
        _use_immediate_transactions(engine)
    return engine


def _use_immediate_transactions(engine: AsyncEngine) -> None:
    # SQLite only locks for writing on the first write, so two deferred
    # transactions can deadlock on lock upgrade. BEGIN IMMEDIATE queues them.
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    # Returned rows are used after commit (responses, evaluator input).
    return async_sessionmaker(engine, expire_on_commit=False)


def get_session_factory(request: Request) -> SessionFactory:
    return request.app.state.session_factory


SessionFactoryDep = Annotated[SessionFactory, Depends(get_session_factory)]


async def run_in_transaction(
    session_factory: SessionFactory,
    work: Callable[[AsyncSession], Awaitable[T]],
) -> T:
    """Run ``work`` inside one transaction: committed if it returns, rolled back if it raises.

    Driver failures surface as ``StorageUnavailable`` / ``TransactionFailed``.
    ``IntegrityError`` is re-raised untouched so callers can treat a
    uniqueness violation as a domain outcome.
    """
    try:
        async with session_factory() as db:
            async with db.begin():
                return await work(db)
    except IntegrityError:
        raise
    except (OperationalError, InterfaceError, OSError) as exc:
        logger.error("Database unavailable: %s", exc)
        raise StorageUnavailable() from exc
    except SQLAlchemyError as exc:
        logger.exception("Transaction rolled back")
        raise TransactionFailed() from exc
