"""API Layer - FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in startup.create_app (no auto-discovery)
    - Routes translate every IO-facing error into a status code
"""
