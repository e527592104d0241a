"""DTOs for bulk provisioning: per-item results, summary and batch metrics."""

from collections import Counter
from dataclasses import dataclass, field

from portal.application.dtos.account import AccountProfile, ErrorInfo


@dataclass(frozen=True)
class PacingPolicy:
    """Batch size and delays used to stay under the provider's rate limits."""

    batch_size: int = 5
    item_delay_seconds: float = 1.0
    batch_delay_seconds: float = 2.0
    max_records: int = 500


@dataclass(frozen=True)
class ProvisioningRequest:
    """One record of a bulk import: profile plus the caller-chosen secret."""

    profile: AccountProfile
    secret: str


@dataclass(frozen=True)
class ProvisioningResult:
    """Outcome of one record; emitted once and never mutated."""

    index: int
    email: str
    success: bool
    user_id: str | None = None
    credential_id: str | None = None
    email_sent: bool = False
    session_restored: bool = False
    message_id: str | None = None
    # set only when success is False; the two below describe side-effect
    # failures of an account that was created
    error: ErrorInfo | None = None
    notification_error: ErrorInfo | None = None
    reauthentication_error: ErrorInfo | None = None


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate counts, always derived from the result list."""

    total: int
    successful: int
    failed: int
    emails_sent: int
    error_breakdown: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: list[ProvisioningResult]) -> "BatchSummary":
        successful = sum(1 for r in results if r.success)
        breakdown = Counter(r.error.code for r in results if not r.success and r.error)
        return cls(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            emails_sent=sum(1 for r in results if r.email_sent),
            error_breakdown=dict(breakdown),
        )


@dataclass(frozen=True)
class BatchMetrics:
    """Timing and counts for one batch."""

    batch_number: int
    record_count: int
    successful: int
    failed: int
    duration_seconds: float


@dataclass(frozen=True)
class BulkProvisioningOutcome:
    """Result of BatchScheduler.run: ``{summary, results[], errors[]}`` plus batch metrics."""

    results: list[ProvisioningResult]
    batches: list[BatchMetrics]

    @property
    def summary(self) -> BatchSummary:
        return BatchSummary.from_results(self.results)

    @property
    def errors(self) -> list[ProvisioningResult]:
        return [r for r in self.results if not r.success]
