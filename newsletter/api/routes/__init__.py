"""Route Modules - one file per endpoint.

Invariants:
    - Each module defines its own APIRouter
    - Routes hold no SQL, they delegate to services/
"""
