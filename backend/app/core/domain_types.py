"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ItemId wraps int — never use a bare int for an item identifier in domain logic
    - Item status is always one of the four ItemStatus values
    - Every worker run ends in exactly one ProcessingOutcome

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders, compare equal to DB strings
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ItemId = NewType("ItemId", int)


# ─── Enums ───────────────────────────────────────────────────────

class ItemStatus(str, Enum):
    """Item lifecycle states — maps to DB `status` column."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    PROCESSED = "PROCESSED"
    FAILED = "FAILED"


class ProcessingOutcome(str, Enum):
    """Terminal state of a single worker run inside a batch."""
    PROCESSED = "processed"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    CANCELLED = "cancelled"
    FAILED = "failed"
