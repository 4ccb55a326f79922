"""
Sync schemas — per-part outcomes and the run report.

Version: 1.0.0
"""
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class PartOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    NO_CHANGE = "no_change"
    SKIPPED = "skipped"
    FAILED = "failed"
    RETIRED = "retired"


class SyncRunReport(BaseModel):
    """Counters for one reconciliation run."""
    pages_fetched: int = 0
    pages_failed: int = 0
    parts_seen: int = 0
    created: int = 0
    updated: int = 0
    no_change: int = 0
    skipped: int = 0
    failed: int = 0
    retired: int = 0
    retire_failed: int = 0
    orphan_retirement_skipped: bool = False
    failed_part_ids: List[str] = Field(default_factory=list)

    def record(self, part_id: str, outcome: PartOutcome) -> None:
        if outcome is PartOutcome.CREATED:
            self.created += 1
        elif outcome is PartOutcome.UPDATED:
            self.updated += 1
        elif outcome is PartOutcome.NO_CHANGE:
            self.no_change += 1
        elif outcome is PartOutcome.SKIPPED:
            self.skipped += 1
        elif outcome is PartOutcome.RETIRED:
            self.retired += 1
        elif outcome is PartOutcome.FAILED:
            self.failed += 1
            self.failed_part_ids.append(part_id)
