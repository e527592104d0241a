"""Bulk provisioning with batching, pacing and per-item failure isolation.

Items run strictly one after another: the identity provider throttles
rapid sign-ups, and every item switches the process-wide admin session.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable, Sequence

from portal.application.dtos.account import AdminCredentials, ErrorInfo
from portal.application.dtos.batch import (
    BatchMetrics,
    BulkProvisioningOutcome,
    PacingPolicy,
    ProvisioningRequest,
    ProvisioningResult,
)
from portal.application.services.provisioning_orchestrator import ProvisioningOrchestrator
from portal.domain.exceptions import (
    PartiallyProvisionedException,
    PortalException,
    ValidationException,
)
from portal.shared.telemetry.tracing import add_span_attributes, add_span_event, traced

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class BatchScheduler:
    """Runs ProvisioningOrchestrator over many requests in paced batches."""

    def __init__(
        self,
        orchestrator: ProvisioningOrchestrator,
        policy: PacingPolicy | None = None,
        sleep: Sleeper = asyncio.sleep,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.orchestrator = orchestrator
        self.policy = policy or PacingPolicy()
        self._sleep = sleep
        self._monotonic = monotonic

    @traced("provisioning.bulk_create")
    async def run(
        self,
        requests: Sequence[ProvisioningRequest],
        admin_credentials: AdminCredentials | None,
        batch_size: int | None = None,
        send_email: bool = True,
    ) -> BulkProvisioningOutcome:
        """Provision every request; never raises because of an item failure.

        Raises:
            ValidationException: Empty input, too many records, or batch size below 1.
        """
        size = self.policy.batch_size if batch_size is None else batch_size
        if not requests:
            raise ValidationException(
                "Missing or invalid records: expected a non-empty list", field="records"
            )
        if size < 1:
            raise ValidationException("Batch size must be at least 1", field="batch_size")
        if len(requests) > self.policy.max_records:
            raise ValidationException(
                f"At most {self.policy.max_records} records can be imported at once",
                field="records",
            )

        batch_count = math.ceil(len(requests) / size)
        add_span_attributes(record_count=len(requests), batch_size=size, batch_count=batch_count)
        logger.info(
            "Bulk provisioning %d records in %d batches of %d",
            len(requests),
            batch_count,
            size,
        )

        results: list[ProvisioningResult] = []
        metrics: list[BatchMetrics] = []
        for batch_number in range(1, batch_count + 1):
            start = (batch_number - 1) * size
            batch = requests[start : start + size]
            add_span_event("batch.start", {"batch_number": batch_number, "size": len(batch)})
            started = self._monotonic()
            batch_results: list[ProvisioningResult] = []

            for offset, request in enumerate(batch):
                batch_results.append(
                    await self._provision(start + offset, len(requests), request, admin_credentials, send_email)
                )
                if offset < len(batch) - 1:
                    await self._sleep(self.policy.item_delay_seconds)

            successful = sum(1 for r in batch_results if r.success)
            metrics.append(
                BatchMetrics(
                    batch_number=batch_number,
                    record_count=len(batch),
                    successful=successful,
                    failed=len(batch_results) - successful,
                    duration_seconds=self._monotonic() - started,
                )
            )
            results.extend(batch_results)
            logger.info(
                "Batch %d/%d done: %d succeeded, %d failed",
                batch_number,
                batch_count,
                successful,
                len(batch_results) - successful,
            )
            if batch_number < batch_count:
                await self._sleep(self.policy.batch_delay_seconds)

        outcome = BulkProvisioningOutcome(results=results, batches=metrics)
        summary = outcome.summary
        logger.info(
            "Bulk provisioning completed: total=%d successful=%d failed=%d emails_sent=%d",
            summary.total,
            summary.successful,
            summary.failed,
            summary.emails_sent,
        )
        return outcome

    async def _provision(
        self,
        index: int,
        total: int,
        request: ProvisioningRequest,
        admin_credentials: AdminCredentials | None,
        send_email: bool,
    ) -> ProvisioningResult:
        email = request.profile.email
        logger.info("Provisioning record %d/%d: %s", index + 1, total, email)
        try:
            created = await self.orchestrator.create_account(
                request.profile,
                request.secret,
                admin_credentials=admin_credentials,
                send_email=send_email,
            )
        except PartiallyProvisionedException as e:
            return ProvisioningResult(
                index=index,
                email=email,
                success=False,
                user_id=e.details.get("user_id"),
                session_restored=bool(e.details.get("session_restored")),
                error=ErrorInfo.from_exception(e),
            )
        except PortalException as e:
            logger.warning("Record %d (%s) failed: %s", index, email, e.error_code)
            return ProvisioningResult(
                index=index, email=email, success=False, error=ErrorInfo.from_exception(e)
            )
        except Exception as e:
            logger.exception("Record %d (%s) failed unexpectedly", index, email)
            return ProvisioningResult(
                index=index,
                email=email,
                success=False,
                error=ErrorInfo(code="INTERNAL_ERROR", message=str(e) or e.__class__.__name__),
            )
        return ProvisioningResult(
            index=index,
            email=created.email,
            success=True,
            user_id=created.user_id,
            credential_id=created.credential_id,
            email_sent=created.email_sent,
            session_restored=created.session_restored,
            message_id=created.message_id,
            notification_error=created.notification_error,
            reauthentication_error=created.reauthentication_error,
        )
