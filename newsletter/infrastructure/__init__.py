"""Infrastructure Layer - database pool and logging.

Invariants:
    - Infrastructure never imports from api/ or services/
    - All SQLAlchemy failures leave this layer as DatabaseError
"""
