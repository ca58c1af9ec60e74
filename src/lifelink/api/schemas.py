from lifelink.models.records import (
    BloodDonor,
    BloodReceiver,
    CamelModel,
    MoneyDonor,
    MoneyReceiver,
    Number,
    OrganDonor,
    OrganReceiver,
)
from lifelink.models.user import UserProfile

class RegisterRequest(CamelModel):
    name: str
    phone: str
    password: str
    profile_photo: str

class LoginRequest(CamelModel):
    phone: str
    password: str

class UpdateUserRequest(CamelModel):
    name: str | None = None
    phone: str | None = None
    profile_photo: str | None = None

class UserResponse(CamelModel):
    message: str
    user: UserProfile

class DonorSubmittedResponse(CamelModel):
    message: str
    donor_id: str
    status: str = "pending_verification"

class ReceiverSubmittedResponse(CamelModel):
    message: str
    receiver_id: str
    status: str = "pending_verification"

class HasDonatedResponse(CamelModel):
    has_donated_before: bool

class BloodReceiverSummary(CamelModel):
    name: str | None = None
    phone: str | None = None
    blood_need: str | None = None
    location: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None

class OrganReceiverSummary(CamelModel):
    name: str | None = None
    phone: str | None = None
    organ_need: str | None = None
    location: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None
    medical_condition: str | None = None

class BloodMatchResponse(CamelModel):
    message: str
    receiver: BloodReceiverSummary
    donors: list[BloodDonor]

class OrganMatchResponse(CamelModel):
    message: str
    receiver: OrganReceiverSummary
    donors: list[OrganDonor]

class PendingVerificationsResponse(CamelModel):
    blood_donors: list[BloodDonor]
    blood_receivers: list[BloodReceiver]
    organ_donors: list[OrganDonor]
    organ_receivers: list[OrganReceiver]
    money_donors: list[MoneyDonor]
    money_receivers: list[MoneyReceiver]

class VerifyRequest(CamelModel):
    type: str | None = None
    id: str | None = None
    status: str | None = None
    notes: str | None = None
