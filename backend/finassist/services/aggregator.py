from __future__ import annotations

import logging
from datetime import datetime

from finassist.services.analytics import Context, build_context, empty_context
from finassist.services.records import normalize_snapshot
from finassist.services.store import RecordStore, fetch_snapshot

logger = logging.getLogger(__name__)


async def aggregate(store: RecordStore, user_id: str, now: datetime) -> Context:
    """Build the analytics Context for ``user_id`` as of ``now``.

    Never raises. A collection that fails to load counts as empty; any other
    failure yields the zeroed Context so callers always get something usable.
    """
    try:
        snapshot = await fetch_snapshot(store, user_id)
        context = build_context(normalize_snapshot(snapshot), now)
    except Exception:
        logger.exception("Error gathering financial context for user %s", user_id)
        return empty_context(now)

    logger.debug(
        "Context gathered for user %s: %d accounts, %d transactions",
        user_id,
        context.summary.account_count,
        context.summary.transaction_count,
    )
    return context
