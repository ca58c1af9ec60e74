import logging
from datetime import datetime, timezone
from typing import NamedTuple

from botocore.exceptions import BotoCoreError, ClientError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from lifelink.core.errors import BadRequestError, ForbiddenError, NotFoundError
from lifelink.data_access.dynamodb import DynamoDataAccess
from lifelink.models.records import (
    BloodDonor,
    BloodReceiver,
    MoneyDonor,
    MoneyReceiver,
    OrganDonor,
    OrganReceiver,
    RecordKind,
    VerifiableRecord,
    utc_now,
)
from lifelink.models.submissions import (
    BloodDonorSubmission,
    BloodReceiverSubmission,
    MoneyDonorSubmission,
    MoneyReceiverSubmission,
    OrganDonorSubmission,
    OrganReceiverSubmission,
)
from lifelink.models.user import DonationLogEntry
from lifelink.services import validation

logger = logging.getLogger(__name__)

EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class MatchRule(NamedTuple):
    receiver_kind: RecordKind
    donor_kind: RecordKind
    need_field: str
    donor_field: str


MATCH_RULES = {
    "blood": MatchRule(RecordKind.BLOOD_RECEIVER, RecordKind.BLOOD_DONOR, "blood_need", "blood_group"),
    "organ": MatchRule(RecordKind.ORGAN_RECEIVER, RecordKind.ORGAN_DONOR, "organ_need", "organ_type"),
}

DONOR_KINDS = {
    "blood": RecordKind.BLOOD_DONOR,
    "organ": RecordKind.ORGAN_DONOR,
}


class DonationService:
    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    # Donor submissions

    def submit_blood_donor(self, body: BloodDonorSubmission) -> BloodDonor:
        validation.require_fields(body.name, body.phone, body.age, body.weight, body.blood_group)
        validation.check_phone(body.phone)
        validation.check_age(body.age)
        validation.check_weight(body.weight)
        donated_before = bool(body.has_donated_before)
        last_date = validation.check_cooldown(donated_before, body.last_donation_date, utc_now())

        donor = BloodDonor(
            name=body.name,
            phone=body.phone,
            age=body.age,
            weight=body.weight,
            blood_group=body.blood_group,
            has_donated_before=donated_before,
            last_donation_date=last_date,
            latitude=body.latitude,
            longitude=body.longitude,
            verification_file=body.verification_file
        )
        self.data_access.put_record(donor)
        logger.info(f"Blood donor {donor.id} submitted for verification.")
        return donor

    def submit_organ_donor(self, body: OrganDonorSubmission) -> OrganDonor:
        validation.require_fields(
            body.name, body.phone, body.organ_type, body.condition_status, body.weight
        )
        validation.check_phone(body.phone)
        validation.check_weight(body.weight)
        donated_before = bool(body.has_donated_before)
        last_date = validation.check_cooldown(donated_before, body.last_donation_date, utc_now())

        donor = OrganDonor(
            name=body.name,
            phone=body.phone,
            organ_type=body.organ_type,
            condition_status=body.condition_status,
            weight=body.weight,
            has_donated_before=donated_before,
            last_donation_date=last_date,
            latitude=body.latitude,
            longitude=body.longitude,
            verification_file=body.verification_file
        )
        self.data_access.put_record(donor)
        logger.info(f"Organ donor {donor.id} submitted for verification.")

        self.record_in_user_log(body.user_id, DonationLogEntry(
            type="organ",
            donor_id=donor.id,
            name=donor.name,
            phone=donor.phone,
            organ_type=donor.organ_type,
            condition_status=donor.condition_status
        ))
        return donor

    def submit_money_donor(self, body: MoneyDonorSubmission) -> MoneyDonor:
        donor = MoneyDonor(
            donor_name=body.donor_name,
            amount=body.amount,
            payment_method=body.payment_method,
            verification_file=body.verification_file
        )
        self.data_access.put_record(donor)
        logger.info(f"Money donation {donor.id} submitted for verification.")

        self.record_in_user_log(body.user_id, DonationLogEntry(
            type="money",
            donor_id=donor.id,
            name=donor.donor_name,
            amount=donor.amount,
            payment_method=donor.payment_method
        ))
        return donor

    # Receiver submissions

    def submit_blood_receiver(self, body: BloodReceiverSubmission) -> BloodReceiver:
        receiver = BloodReceiver(**body.model_dump())
        self.data_access.put_record(receiver)
        logger.info(f"Blood receiver {receiver.id} submitted for verification.")
        return receiver

    def submit_organ_receiver(self, body: OrganReceiverSubmission) -> OrganReceiver:
        receiver = OrganReceiver(**body.model_dump())
        self.data_access.put_record(receiver)
        logger.info(f"Organ receiver {receiver.id} submitted for verification.")
        return receiver

    def submit_money_receiver(self, body: MoneyReceiverSubmission) -> MoneyReceiver:
        receiver = MoneyReceiver(**body.model_dump())
        self.data_access.put_record(receiver)
        logger.info(f"Money receiver {receiver.id} submitted for verification.")
        return receiver

    # Donation log

    @retry(
        wait=wait_exponential(multiplier=0.2, max=2),
        stop=stop_after_attempt(3),
        retry=retry_if_exception_type((ClientError, BotoCoreError)),
        reraise=True
    )
    def _append_donation(self, user_id: str, entry: DonationLogEntry) -> bool:
        return self.data_access.append_donation(user_id, entry)

    def record_in_user_log(self, user_id: str | None, entry: DonationLogEntry) -> None:
        """
        Best-effort append to a signed-in user's donation log.

        The donor record is already saved; failures here are logged and dropped.
        """
        if not user_id:
            return
        try:
            appended = self._append_donation(user_id, entry)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Could not log donation {entry.donor_id} for user {user_id}: {e}")
            return

        if not appended:
            logger.info(f"User {user_id} not found, donation {entry.donor_id} not logged.")

    # Listing

    def list_blood_donors(self) -> list[VerifiableRecord]:
        donors = self.data_access.find_records(RecordKind.BLOOD_DONOR, verification_status="approved")
        return sorted(donors, key=lambda d: d.submitted_at)

    def list_organ_donors(self) -> list[VerifiableRecord]:
        # Unlike blood donors this listing is not limited to approved records.
        donors = self.data_access.find_records(RecordKind.ORGAN_DONOR)
        return sorted(donors, key=lambda d: d.submitted_at)

    def has_donated_before(self, phone: str | None, donation_type: str | None) -> bool:
        if not validation.is_valid_phone(phone):
            raise BadRequestError("Valid phone is required")
        if donation_type not in DONOR_KINDS:
            raise BadRequestError("type must be one of: blood, organ")

        return len(self.data_access.find_records(DONOR_KINDS[donation_type], phone=phone)) > 0

    # Matching

    def find_matching_donors(
        self, resource: str, phone: str | None
    ) -> tuple[VerifiableRecord, list[VerifiableRecord]]:
        """
        Donors for the receiver registered under ``phone``.

        Only an approved receiver sees donors, and only approved donors
        whose blood group or organ type equals the receiver's need.
        """
        rule = MATCH_RULES[resource]
        if not validation.is_valid_phone(phone):
            raise BadRequestError("Valid phone number is required")

        approved = self.data_access.find_records(
            rule.receiver_kind, phone=phone, verification_status="approved"
        )
        if not approved:
            submissions = self.data_access.find_records(rule.receiver_kind, phone=phone)
            if not submissions:
                raise NotFoundError("Receiver registration not found. Please register first.")
            latest = max(submissions, key=lambda r: r.submitted_at)
            logger.info(f"Matching denied for {rule.receiver_kind.value} {latest.id}: {latest.verification_status}")
            raise ForbiddenError(
                "Receiver has not been approved yet. Please wait for admin verification.",
                status=latest.verification_status
            )

        receiver = max(approved, key=lambda r: (r.verified_at or EARLIEST, r.submitted_at))
        need = getattr(receiver, rule.need_field)
        if not need:
            return receiver, []

        donors = self.data_access.find_records(
            rule.donor_kind,
            verification_status="approved",
            **{rule.donor_field: need}
        )
        donors.sort(key=lambda d: d.submitted_at)
        return receiver, donors
