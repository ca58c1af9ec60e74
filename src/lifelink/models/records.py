import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from lifelink.core.errors import BadRequestError


VerificationStatus = Literal["pending", "approved", "rejected"]
Number = int | float


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Python attributes in snake_case, JSON and stored items in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordKind(str, Enum):
    BLOOD_DONOR = "blood-donor"
    BLOOD_RECEIVER = "blood-receiver"
    ORGAN_DONOR = "organ-donor"
    ORGAN_RECEIVER = "organ-receiver"
    MONEY_DONOR = "money-donor"
    MONEY_RECEIVER = "money-receiver"

    @classmethod
    def parse(cls, value: str | None) -> "RecordKind":
        try:
            return cls(value)
        except ValueError:
            raise BadRequestError("Invalid verification type") from None

    @property
    def group_name(self) -> str:
        # "blood-donor" -> "bloodDonors"
        resource, role = self.value.split("-")
        return f"{resource}{role.capitalize()}s"


class VerifiableRecord(CamelModel):
    """
    Shared verification envelope carried by every donor and receiver record.

    ``is_verified`` always mirrors ``verification_status == "approved"``.
    """

    kind: ClassVar[RecordKind]

    id: str = Field(default_factory=new_id)
    is_verified: bool = False
    verification_status: VerificationStatus = "pending"
    admin_notes: str = ""
    submitted_at: datetime = Field(default_factory=utc_now)
    verified_at: datetime | None = None
    verification_file: str | None = None

    @model_validator(mode="after")
    def sync_is_verified(self):
        self.is_verified = self.verification_status == "approved"
        return self


class BloodDonor(VerifiableRecord):
    kind: ClassVar[RecordKind] = RecordKind.BLOOD_DONOR

    name: str | None = None
    phone: str | None = None
    age: Number | None = None
    weight: Number | None = None
    blood_group: str | None = None
    has_donated_before: bool = False
    last_donation_date: datetime | None = None
    latitude: Number | None = None
    longitude: Number | None = None


class BloodReceiver(VerifiableRecord):
    kind: ClassVar[RecordKind] = RecordKind.BLOOD_RECEIVER

    name: str | None = None
    phone: str | None = None
    location: str | None = None
    blood_need: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None
    proof_file: str | None = None


class OrganDonor(VerifiableRecord):
    kind: ClassVar[RecordKind] = RecordKind.ORGAN_DONOR

    name: str | None = None
    phone: str | None = None
    weight: Number | None = None
    organ_type: str | None = None
    condition_status: str | None = None
    has_donated_before: bool = False
    last_donation_date: datetime | None = None
    latitude: Number | None = None
    longitude: Number | None = None


class OrganReceiver(VerifiableRecord):
    kind: ClassVar[RecordKind] = RecordKind.ORGAN_RECEIVER

    name: str | None = None
    phone: str | None = None
    location: str | None = None
    organ_need: str | None = None
    medical_condition: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None
    proof_file: str | None = None


class MoneyDonor(VerifiableRecord):
    kind: ClassVar[RecordKind] = RecordKind.MONEY_DONOR

    donor_name: str | None = None
    amount: Number | None = None
    payment_method: str | None = None
    timestamp: datetime = Field(default_factory=utc_now)


class MoneyReceiver(VerifiableRecord):
    kind: ClassVar[RecordKind] = RecordKind.MONEY_RECEIVER

    name: str | None = None
    age: Number | None = None
    phone: str | None = None
    money_amount: Number | None = None
    money_need: str | None = None
    proof_file: str | None = None


RECORD_MODELS: dict[RecordKind, type[VerifiableRecord]] = {
    RecordKind.BLOOD_DONOR: BloodDonor,
    RecordKind.BLOOD_RECEIVER: BloodReceiver,
    RecordKind.ORGAN_DONOR: OrganDonor,
    RecordKind.ORGAN_RECEIVER: OrganReceiver,
    RecordKind.MONEY_DONOR: MoneyDonor,
    RecordKind.MONEY_RECEIVER: MoneyReceiver,
}
