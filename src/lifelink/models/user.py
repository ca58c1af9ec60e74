from datetime import datetime
from typing import Literal

from pydantic import Field

from lifelink.models.records import CamelModel, Number, new_id, utc_now


class DonationLogEntry(CamelModel):
    """One line of a user's own donation history; never edited after append."""

    type: Literal["organ", "money"]
    donor_id: str
    name: str | None = None
    timestamp: datetime = Field(default_factory=utc_now)
    status: str = "pending_verification"

    # organ entries
    phone: str | None = None
    organ_type: str | None = None
    condition_status: str | None = None

    # money entries
    amount: Number | None = None
    payment_method: str | None = None


class UserProfile(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    phone: str
    profile_photo: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    donations: list[DonationLogEntry] = Field(default_factory=list)


class User(UserProfile):
    password: str

    def public(self) -> UserProfile:
        return UserProfile.model_validate(self.model_dump(exclude={"password"}))
