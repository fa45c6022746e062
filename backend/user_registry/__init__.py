"""User Registry: CRUD HTTP service for a single User resource.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
