"""Reconciliation outcomes and aggregate batch results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ssm_document.core.errors import BatchFailedError, DocumentError, Stage


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(UTC)


class Operation(str, Enum):
    """Per-document operation a batch runs."""

    DEPLOY = "deploy"
    REMOVE = "remove"


class DocumentAction(str, Enum):
    """What a successful reconciliation did to the registry."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    UNSHARED = "unshared"
    ABSENT = "absent"


@dataclass
class ReconciliationOutcome:
    """Result of one document's reconciliation."""

    name: str
    operation: Operation
    action: DocumentAction | None = None
    error: Exception | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def stage(self) -> Stage | None:
        """Stage the failure originated in (``None`` on success or unexpected errors)."""
        if isinstance(self.error, DocumentError):
            return self.error.stage
        return None

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "operation": self.operation.value,
            "action": self.action.value if self.action else None,
            "succeeded": self.succeeded,
            "stage": self.stage.value if self.stage else None,
            "error": str(self.error) if self.error else None,
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class BatchResult:
    """Aggregate result of a batch run."""

    batch_id: str
    operation: Operation
    outcomes: list[ReconciliationOutcome] = field(default_factory=list)
    chunks: int = 0
    started_at: datetime = field(default_factory=utcnow)
    completed_at: datetime | None = None

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.succeeded)

    @property
    def failures(self) -> list[ReconciliationOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def summary(self) -> str:
        if self.failed:
            return f"{self.failed} of {self.total} documents failed {self.operation.value}"
        return f"{self.succeeded} of {self.total} documents completed {self.operation.value}"

    def raise_for_failures(self) -> None:
        """Raise ``BatchFailedError`` when any document failed."""
        if self.failed:
            raise BatchFailedError(self.failed, self.total, self.operation.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "batch_id": self.batch_id,
            "operation": self.operation.value,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "chunks": self.chunks,
            "duration_seconds": self.duration_seconds,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
