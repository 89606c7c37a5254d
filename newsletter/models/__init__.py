"""ORM Models - SQLAlchemy declarative models.

All models are imported here so Base.metadata is complete before
Alembic or a test fixture inspects it.
"""

from newsletter.models.subscription import Subscription  # noqa: F401
