"""Processing Stats — per-outcome counters for one batch, no IO.

Invariants:
    - total == sum of all outcome counts
    - Every ProcessingOutcome is present in as_log_fields(), zero when unseen
"""

from collections import Counter
from dataclasses import dataclass, field

from app.core.domain_types import ProcessingOutcome


@dataclass
class ProcessingStats:
    """Tally of worker outcomes — lets operators see silently skipped items."""
    counts: Counter = field(default_factory=Counter)

    @classmethod
    def from_outcomes(cls, outcomes: list[ProcessingOutcome]) -> "ProcessingStats":
        return cls(counts=Counter(outcomes))

    def count(self, outcome: ProcessingOutcome) -> int:
        return self.counts[outcome]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def skipped(self) -> int:
        """Items that ended in any outcome other than processed."""
        return self.total - self.counts[ProcessingOutcome.PROCESSED]

    def as_log_fields(self) -> dict[str, int]:
        fields = {o.value: self.counts[o] for o in ProcessingOutcome}
        fields["total"] = self.total
        return fields
