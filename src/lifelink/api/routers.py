from fastapi import APIRouter, Depends, Query, status

from lifelink.api.schemas import (
    BloodMatchResponse,
    BloodReceiverSummary,
    DonorSubmittedResponse,
    HasDonatedResponse,
    LoginRequest,
    OrganMatchResponse,
    OrganReceiverSummary,
    PendingVerificationsResponse,
    ReceiverSubmittedResponse,
    RegisterRequest,
    UpdateUserRequest,
    UserResponse,
    VerifyRequest,
)
from lifelink.core.dependencies import (
    get_donation_service,
    get_user_service,
    get_verification_service,
    require_admin,
)
from lifelink.models.records import BloodDonor, OrganDonor
from lifelink.models.submissions import (
    BloodDonorSubmission,
    BloodReceiverSubmission,
    MoneyDonorSubmission,
    MoneyReceiverSubmission,
    OrganDonorSubmission,
    OrganReceiverSubmission,
)
from lifelink.models.user import UserProfile
from lifelink.services.donation_service import DonationService
from lifelink.services.user_service import UserService
from lifelink.services.verification_service import VerificationService

router = APIRouter(prefix="/api")
admin_router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])

MATCH_FOUND = "Receiver verified. Showing available donors."
RECEIVER_PENDING = (
    "registration submitted for verification. Donor details will be available "
    "once an admin approves your request."
)


# Users

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, users: UserService = Depends(get_user_service)):
    user = users.register(
        name=body.name,
        phone=body.phone,
        password=body.password,
        profile_photo=body.profile_photo
    )
    return UserResponse(message="User registered successfully", user=user)

@router.post("/login", response_model=UserResponse)
def login(body: LoginRequest, users: UserService = Depends(get_user_service)):
    user = users.login(phone=body.phone, password=body.password)
    return UserResponse(message="Login successful", user=user)

@router.get("/user/{user_id}", response_model=UserProfile)
def get_user(user_id: str, users: UserService = Depends(get_user_service)):
    return users.get_user(user_id)

@router.put("/user/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    body: UpdateUserRequest,
    users: UserService = Depends(get_user_service)
):
    user = users.update_user(
        user_id,
        name=body.name,
        phone=body.phone,
        profile_photo=body.profile_photo
    )
    return UserResponse(message="Profile updated successfully", user=user)

@router.get("/users", response_model=list[UserProfile])
def list_users(users: UserService = Depends(get_user_service)):
    return users.list_users()


# Donors

@router.get("/has-donated", response_model=HasDonatedResponse)
def has_donated(
    phone: str | None = None,
    donation_type: str | None = Query(default=None, alias="type"),
    donations: DonationService = Depends(get_donation_service)
):
    return HasDonatedResponse(has_donated_before=donations.has_donated_before(phone, donation_type))

@router.post("/blood-donor", response_model=DonorSubmittedResponse, status_code=status.HTTP_201_CREATED)
def submit_blood_donor(
    body: BloodDonorSubmission,
    donations: DonationService = Depends(get_donation_service)
):
    donor = donations.submit_blood_donor(body)
    return DonorSubmittedResponse(
        message="Blood donor registration submitted for verification",
        donor_id=donor.id
    )

@router.get("/blood-donors", response_model=list[BloodDonor])
def list_blood_donors(donations: DonationService = Depends(get_donation_service)):
    return donations.list_blood_donors()

@router.post("/organ-donor", response_model=DonorSubmittedResponse, status_code=status.HTTP_201_CREATED)
def submit_organ_donor(
    body: OrganDonorSubmission,
    donations: DonationService = Depends(get_donation_service)
):
    donor = donations.submit_organ_donor(body)
    return DonorSubmittedResponse(
        message="Organ donor registration submitted for verification",
        donor_id=donor.id
    )

@router.get("/organ-donors", response_model=list[OrganDonor])
def list_organ_donors(donations: DonationService = Depends(get_donation_service)):
    return donations.list_organ_donors()

@router.post("/money-donor", response_model=DonorSubmittedResponse, status_code=status.HTTP_201_CREATED)
def submit_money_donor(
    body: MoneyDonorSubmission,
    donations: DonationService = Depends(get_donation_service)
):
    donor = donations.submit_money_donor(body)
    return DonorSubmittedResponse(
        message="Money donation submitted for verification",
        donor_id=donor.id
    )


# Receivers

@router.post(
    "/blood-receiver",
    response_model=ReceiverSubmittedResponse,
    status_code=status.HTTP_201_CREATED
)
def submit_blood_receiver(
    body: BloodReceiverSubmission,
    donations: DonationService = Depends(get_donation_service)
):
    receiver = donations.submit_blood_receiver(body)
    return ReceiverSubmittedResponse(
        message=f"Blood receiver {RECEIVER_PENDING}",
        receiver_id=receiver.id
    )

@router.get("/blood-receiver/matching-donors", response_model=BloodMatchResponse)
def blood_matching_donors(
    phone: str | None = None,
    donations: DonationService = Depends(get_donation_service)
):
    receiver, donors = donations.find_matching_donors("blood", phone)
    return BloodMatchResponse(
        message=MATCH_FOUND,
        receiver=BloodReceiverSummary.model_validate(receiver.model_dump()),
        donors=donors
    )

@router.post(
    "/organ-receiver",
    response_model=ReceiverSubmittedResponse,
    status_code=status.HTTP_201_CREATED
)
def submit_organ_receiver(
    body: OrganReceiverSubmission,
    donations: DonationService = Depends(get_donation_service)
):
    receiver = donations.submit_organ_receiver(body)
    return ReceiverSubmittedResponse(
        message=f"Organ receiver {RECEIVER_PENDING}",
        receiver_id=receiver.id
    )

@router.get("/organ-receiver/matching-donors", response_model=OrganMatchResponse)
def organ_matching_donors(
    phone: str | None = None,
    donations: DonationService = Depends(get_donation_service)
):
    receiver, donors = donations.find_matching_donors("organ", phone)
    return OrganMatchResponse(
        message=MATCH_FOUND,
        receiver=OrganReceiverSummary.model_validate(receiver.model_dump()),
        donors=donors
    )

@router.post(
    "/money-receiver",
    response_model=ReceiverSubmittedResponse,
    status_code=status.HTTP_201_CREATED
)
def submit_money_receiver(
    body: MoneyReceiverSubmission,
    donations: DonationService = Depends(get_donation_service)
):
    receiver = donations.submit_money_receiver(body)
    return ReceiverSubmittedResponse(
        message="Money receiver registration submitted for verification",
        receiver_id=receiver.id
    )


# Admin

@admin_router.get("/pending-verifications", response_model=PendingVerificationsResponse)
def pending_verifications(verifications: VerificationService = Depends(get_verification_service)):
    pending = verifications.list_pending()
    return PendingVerificationsResponse(
        **{kind.group_name: records for kind, records in pending.items()}
    )

@admin_router.get("/verification/{kind}/{record_id}")
def verification_detail(
    kind: str,
    record_id: str,
    verifications: VerificationService = Depends(get_verification_service)
):
    record = verifications.get_detail(kind, record_id)
    return record.model_dump(mode="json", by_alias=True)

@admin_router.post("/verify")
def verify(body: VerifyRequest, verifications: VerificationService = Depends(get_verification_service)):
    record = verifications.verify(body.type, body.id, body.status, body.notes)
    return {
        "message": f"Verification {body.status} successfully",
        "record": record.model_dump(mode="json", by_alias=True)
    }
