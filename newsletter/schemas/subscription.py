"""Subscription Schemas - the URL-encoded form accepted by POST /subscriptions.

Invariants:
    - email and name are both required strings
    - Values are passed through verbatim (no strip, no lowercasing)
"""

from pydantic import BaseModel


class SubscriptionForm(BaseModel):
    """Form fields of a subscription request."""
    email: str
    name: str
