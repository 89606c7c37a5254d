"""Subscription Persistence - single-statement insert and read-back.

Invariants:
    - One INSERT per accepted submission; id from uuid4, subscribed_at from now()
    - No retries: the first failure is logged at ERROR and raised as DatabaseError
    - A connection is held for one statement plus its commit
"""

import logging
import uuid

from sqlalchemy import func, insert, select

from newsletter.core.errors import DatabaseError
from newsletter.infrastructure.database import DatabaseSessionManager
from newsletter.infrastructure.observability import span
from newsletter.models.subscription import Subscription
from newsletter.schemas.subscription import SubscriptionForm

logger = logging.getLogger(__name__)


async def insert_subscriber(
    db_manager: DatabaseSessionManager, form: SubscriptionForm,
) -> uuid.UUID:
    """Persist one subscriber and return its generated id."""
    subscriber_id = uuid.uuid4()
    stmt = insert(Subscription).values(
        id=subscriber_id,
        email=form.email,
        name=form.name,
        subscribed_at=func.now(),
    )
    with span("Saving new subscriber details in the database"):
        try:
            async with db_manager.session() as db:
                await db.execute(stmt)
                await db.commit()
        except DatabaseError as e:
            logger.error(
                f"Failed to execute query: {e.__cause__!r}",
                extra={"error_code": e.code},
            )
            raise
        logger.info("New subscriber saved", extra={"subscriber_id": str(subscriber_id)})
    return subscriber_id


async def list_subscribers(
    db_manager: DatabaseSessionManager,
) -> list[Subscription]:
    """All stored subscribers, oldest first."""
    async with db_manager.session() as db:
        result = await db.execute(
            select(Subscription).order_by(Subscription.subscribed_at, Subscription.id),
        )
        return list(result.scalars().all())
