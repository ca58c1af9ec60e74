from lifelink.models.records import CamelModel, Number


class BloodDonorSubmission(CamelModel):
    name: str | None = None
    phone: str | None = None
    age: Number | None = None
    weight: Number | None = None
    blood_group: str | None = None
    has_donated_before: bool | None = False
    last_donation_date: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None
    user_id: str | None = None
    verification_file: str | None = None


class OrganDonorSubmission(CamelModel):
    name: str | None = None
    phone: str | None = None
    organ_type: str | None = None
    condition_status: str | None = None
    weight: Number | None = None
    has_donated_before: bool | None = False
    last_donation_date: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None
    user_id: str | None = None
    verification_file: str | None = None


class MoneyDonorSubmission(CamelModel):
    donor_name: str | None = None
    amount: Number | None = None
    payment_method: str | None = None
    user_id: str | None = None
    verification_file: str | None = None


class BloodReceiverSubmission(CamelModel):
    name: str | None = None
    phone: str | None = None
    location: str | None = None
    blood_need: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None
    verification_file: str | None = None


class OrganReceiverSubmission(CamelModel):
    name: str | None = None
    phone: str | None = None
    location: str | None = None
    organ_need: str | None = None
    medical_condition: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None
    verification_file: str | None = None


class MoneyReceiverSubmission(CamelModel):
    name: str | None = None
    age: Number | None = None
    phone: str | None = None
    money_amount: Number | None = None
    money_need: str | None = None
    verification_file: str | None = None
