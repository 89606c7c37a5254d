"""Newsletter Application Package - subscription intake service.

Invariants:
    - Package root contains no executable code (no import side effects)
"""
