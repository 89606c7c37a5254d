"""Subscriptions - accepts newsletter sign-ups submitted as URL-encoded forms.

Invariants:
    - Form parsing happens before any database access; bad forms never reach
      the pool and are answered 400 by the validation error handler
    - 200 and 500 responses have empty bodies
    - Persistence errors are logged by the service, never echoed to the client
    - The whole request runs inside a span tagged with subscriber_email/subscriber_name
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Response, status

from newsletter.core.errors import DatabaseError
from newsletter.infrastructure.database import (
    DatabaseSessionManager, get_db_manager,
)
from newsletter.infrastructure.observability import span
from newsletter.schemas.subscription import SubscriptionForm
from newsletter.services.subscriptions import insert_subscriber

logger = logging.getLogger(__name__)
router = APIRouter(tags=["subscriptions"])


@router.post("/subscriptions", status_code=status.HTTP_200_OK)
async def subscribe(
    form: Annotated[SubscriptionForm, Form()],
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
) -> Response:
    """Store a subscriber. 200 on success, 500 if the insert fails."""
    with span(
        "Adding a new subscriber",
        subscriber_email=form.email,
        subscriber_name=form.name,
    ):
        try:
            await insert_subscriber(db_manager, form)
        except DatabaseError:
            return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(status_code=status.HTTP_200_OK)
