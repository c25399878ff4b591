"""Infrastructure Layer — database access, worker pool and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - All storage failures mapped to typed errors from core/errors.py
"""
