import logging

from lifelink.core.errors import BadRequestError, ConflictError, NotFoundError
from lifelink.data_access.dynamodb import DynamoDataAccess
from lifelink.models.records import RecordKind, VerifiableRecord, utc_now

logger = logging.getLogger(__name__)

DECISIONS = ("approved", "rejected")


class VerificationService:
    """Admin review of donor and receiver submissions."""

    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def list_pending(self) -> dict[RecordKind, list[VerifiableRecord]]:
        return {
            kind: sorted(
                self.data_access.find_records(kind, verification_status="pending"),
                key=lambda r: r.submitted_at,
            )
            for kind in RecordKind
        }

    def get_detail(self, kind_name: str, record_id: str) -> VerifiableRecord:
        kind = RecordKind.parse(kind_name)
        record = self.data_access.get_record(kind, record_id)
        if record is None:
            raise NotFoundError("Verification not found")
        return record

    def verify(
        self,
        kind_name: str | None,
        record_id: str | None,
        status: str | None,
        notes: str | None = None
    ) -> VerifiableRecord:
        kind = RecordKind.parse(kind_name)
        if status not in DECISIONS:
            raise BadRequestError("Invalid status")

        record = self.data_access.get_record(kind, record_id) if record_id else None
        if record is None:
            raise NotFoundError("Record not found")
        if record.verification_status != "pending":
            raise ConflictError(f"Record has already been {record.verification_status}")

        updated = self.data_access.update_verification(kind, record_id, status, notes or "", utc_now())
        if updated is None:
            # Decided by someone else between the read and the write
            raise ConflictError("Record has already been verified")

        logger.info(f"{kind.value} {record_id} {status}.")
        return updated
