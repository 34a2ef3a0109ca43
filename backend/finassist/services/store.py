from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finassist.models import (
    Account,
    Category,
    InvestmentAsset,
    LendBorrow,
    Purchase,
    SavingsGoal,
    Transaction,
)

logger = logging.getLogger(__name__)

COLLECTIONS: tuple[str, ...] = (
    "accounts",
    "transactions",
    "purchases",
    "lend_borrow",
    "savings_goals",
    "categories",
    "investment_assets",
)

COLLECTION_MODELS = {
    "accounts": Account,
    "transactions": Transaction,
    "purchases": Purchase,
    "lend_borrow": LendBorrow,
    "savings_goals": SavingsGoal,
    "categories": Category,
    "investment_assets": InvestmentAsset,
}

NEWEST_FIRST = {"transactions", "purchases"}

Snapshot = dict[str, list[Mapping[str, Any]]]


class RecordStore(Protocol):
    async def fetch(self, collection: str, user_id: str) -> list[Mapping[str, Any]]: ...


class SqlRecordStore:
    """Read-only access to a user's collections.

    Each fetch runs in its own session so collections can be loaded
    concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch(self, collection: str, user_id: str) -> list[Mapping[str, Any]]:
        table = COLLECTION_MODELS[collection].__table__
        stmt = select(table).where(table.c.user_id == user_id)
        if collection in NEWEST_FIRST:
            stmt = stmt.order_by(table.c.created_at.desc())
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).mappings().all()
        return [dict(row) for row in rows]


async def fetch_snapshot(store: RecordStore, user_id: str) -> Snapshot:
    results = await asyncio.gather(
        *(store.fetch(collection, user_id) for collection in COLLECTIONS),
        return_exceptions=True,
    )
    snapshot: Snapshot = {}
    for collection, result in zip(COLLECTIONS, results, strict=True):
        if isinstance(result, BaseException):
            logger.error("Error fetching %s for user %s: %r", collection, user_id, result)
            snapshot[collection] = []
        else:
            snapshot[collection] = list(result)
    return snapshot
