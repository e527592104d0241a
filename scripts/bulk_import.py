"""Bulk-create doctor accounts from a JSON file.

File format:
    {
      "admin_email": "admin@example.com",
      "batch_size": 5,
      "send_email": true,
      "records": [
        {"email": "dr.a@example.com", "first_name": "Ann", "last_name": "Lee",
         "temporary_password": "Xy9!za02Qr", "clinic_name": "North Clinic"}
      ]
    }

The admin password is read from BULK_IMPORT_ADMIN_PASSWORD or prompted for.
Records are paced with BULK_* settings; failed records are listed at the end.

Usage:
    python -m scripts.bulk_import path/to/doctors.json
"""

from __future__ import annotations

import asyncio
import getpass
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from portal.application.dtos.account import AdminCredentials
from portal.application.dtos.batch import BulkProvisioningOutcome, ProvisioningRequest
from portal.core.config import get_settings
from portal.core.container import PortalServices
from portal.domain.enums import UserType
from portal.domain.exceptions import PortalException
from portal.schemas.account import AccountProfileIn
from portal.shared.telemetry.logging import setup_logging


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    load_dotenv(_project_root() / ".env", override=True)


def load_requests(data: dict, created_by: str) -> list[ProvisioningRequest]:
    """Parse the records array into provisioning requests.

    Raises:
        ValueError: records missing or a record has the wrong shape.
    """
    records = data.get("records")
    if not isinstance(records, list):
        raise ValueError("'records' must be a list of profile objects")
    requests: list[ProvisioningRequest] = []
    for position, raw in enumerate(records):
        try:
            record = AccountProfileIn.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Record {position} is malformed: {e.error_count()} error(s)") from e
        requests.append(
            ProvisioningRequest(
                profile=record.to_profile(UserType.DOCTOR, created_by=created_by),
                secret=record.temporary_password,
            )
        )
    return requests


def print_report(outcome: BulkProvisioningOutcome) -> None:
    summary = outcome.summary
    for batch in outcome.batches:
        print(
            f"Batch {batch.batch_number}: {batch.record_count} records, "
            f"{batch.successful} ok, {batch.failed} failed ({batch.duration_seconds:.1f}s)"
        )
    print(
        f"Total {summary.total}: {summary.successful} created, {summary.failed} failed, "
        f"{summary.emails_sent} emails sent"
    )
    for code, count in sorted(summary.error_breakdown.items()):
        print(f"  {code}: {count}")
    for created in outcome.results:
        if created.success and created.notification_error:
            print(
                f"  Record {created.index} ({created.email}): created, email not sent: "
                f"{created.notification_error.message}",
                file=sys.stderr,
            )
    for failed in outcome.errors:
        message = failed.error.message if failed.error else "unknown error"
        print(f"  Record {failed.index} ({failed.email}): {message}", file=sys.stderr)


async def run(path: Path) -> int:
    _load_env()
    settings = get_settings()
    setup_logging()
    data = json.loads(path.read_text(encoding="utf-8"))
    admin_email = data.get("admin_email")
    if not admin_email:
        print("Seed file must name 'admin_email'", file=sys.stderr)
        return 2
    try:
        requests = load_requests(data, created_by=admin_email)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2
    password = os.environ.get("BULK_IMPORT_ADMIN_PASSWORD") or getpass.getpass(
        f"Password for {admin_email}: "
    )

    services = PortalServices.build(settings)
    services.start()
    try:
        await services.auth_service.sign_in(admin_email, password)
        outcome = await services.scheduler.run(
            requests,
            AdminCredentials(email=admin_email, password=password),
            batch_size=data.get("batch_size"),
            send_email=bool(data.get("send_email", True)),
        )
    except PortalException as e:
        print(f"Bulk import aborted: {e.message}", file=sys.stderr)
        return 1
    finally:
        await services.close()

    print_report(outcome)
    return 0 if outcome.summary.failed == 0 else 1


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.bulk_import path/to/records.json", file=sys.stderr)
        sys.exit(2)
    path = Path(sys.argv[1])
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if not path.is_file():
        print(f"Records file not found: {path}", file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(run(path)))


if __name__ == "__main__":
    main()
