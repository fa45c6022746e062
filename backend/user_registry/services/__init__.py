"""Service Layer: orchestrates validation and persistence per operation.

Invariants:
    - Services receive repositories by injection; they never open connections
    - Services raise core/errors.py types only
"""
