"""Infrastructure Layer: database access, persistence stores and logging.

Invariants:
    - Infrastructure never imports from api/ or services/
    - All storage failures are mapped to core/errors.py types before leaving this layer
"""
