"""Subscription ORM - one row per accepted sign-up submission.

Invariants:
    - id is a UUID generated by the service, never by the client
    - email and name are stored verbatim (no normalization, no uniqueness)
    - subscribed_at is assigned by the database clock at insert time
    - Rows are append-only: nothing in the service updates or deletes them
"""

import uuid
from datetime import datetime

from sqlalchemy import Text, DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from newsletter.db.base import Base


class Subscription(Base):
    """A newsletter subscriber."""
    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    subscribed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Subscription id={self.id} email={self.email!r}>"
