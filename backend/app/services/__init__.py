"""Services Layer — batch processing orchestration over the item repository.

Invariants:
    - Services depend on core protocols, never on ORM sessions directly
"""
