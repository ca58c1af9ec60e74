import logging

from lifelink.core.errors import ConflictError, NotFoundError, UnauthorizedError
from lifelink.core.security import hash_password, verify_password
from lifelink.data_access.dynamodb import DynamoDataAccess
from lifelink.models.user import User, UserProfile

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Invalid phone number or password"


class UserService:
    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def register(self, name: str, phone: str, password: str, profile_photo: str) -> UserProfile:
        user = User(
            name=name,
            phone=phone,
            password=hash_password(password),
            profile_photo=profile_photo
        )

        if not self.data_access.claim_phone(phone, user.id):
            raise ConflictError("User with this phone number already exists")
        try:
            self.data_access.create_user(user)
        except Exception:
            self.data_access.release_phone(phone, user.id)
            raise

        logger.info(f"Registered user {user.id}.")
        return user.public()

    def login(self, phone: str, password: str) -> UserProfile:
        # Same error for unknown phone and wrong password
        user = self.data_access.get_user_by_phone(phone)
        if user is None or not verify_password(password, user.password):
            raise UnauthorizedError(LOGIN_FAILED)
        return user.public()

    def get_user(self, user_id: str) -> UserProfile:
        user = self.data_access.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user.public()

    def update_user(
        self,
        user_id: str,
        name: str | None = None,
        phone: str | None = None,
        profile_photo: str | None = None
    ) -> UserProfile:
        user = self.data_access.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        changes = {
            field: value
            for field, value in (("name", name), ("phone", phone), ("profile_photo", profile_photo))
            if value
        }

        phone_changed = "phone" in changes and changes["phone"] != user.phone
        if phone_changed and not self.data_access.claim_phone(changes["phone"], user_id):
            raise ConflictError("Phone number already in use")

        updated = self.data_access.update_user(user_id, changes)
        if updated is None:
            if phone_changed:
                self.data_access.release_phone(changes["phone"], user_id)
            raise NotFoundError("User not found")

        if phone_changed:
            self.data_access.release_phone(user.phone, user_id)
        return updated.public()

    def list_users(self) -> list[UserProfile]:
        users = sorted(self.data_access.list_users(), key=lambda u: u.created_at)
        return [user.public() for user in users]
