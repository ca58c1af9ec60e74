import hmac
import logging
from functools import lru_cache

import boto3
from botocore.exceptions import ClientError
from fastapi import Depends, Header, Request

from lifelink.core.config import Settings
from lifelink.core.errors import UnauthorizedError
from lifelink.data_access.dynamodb import DynamoDataAccess, create_table
from lifelink.services.donation_service import DonationService
from lifelink.services.user_service import UserService
from lifelink.services.verification_service import VerificationService

logger = logging.getLogger(__name__)


@lru_cache()
def get_boto_session(region_name: str, profile_name: str | None) -> boto3.Session:
    return boto3.Session(
        region_name=region_name,
        profile_name=profile_name
    )


def open_data_access(settings: Settings) -> DynamoDataAccess:
    session = get_boto_session(settings.AWS_REGION, settings.AWS_PROFILE)
    dynamo_resource = session.resource('dynamodb', endpoint_url=settings.DYNAMODB_ENDPOINT_URL)
    table = dynamo_resource.Table(settings.DYNAMODB_TABLE_NAME)

    if settings.CREATE_TABLE_ON_STARTUP:
        try:
            table.load()
        except ClientError as e:
            if e.response['Error']['Code'] != 'ResourceNotFoundException':
                raise
            table = create_table(dynamo_resource, settings.DYNAMODB_TABLE_NAME)

    return DynamoDataAccess(table=table)


# Request-scoped providers; the data access object lives on app.state

def get_data_access(request: Request) -> DynamoDataAccess:
    return request.app.state.data_access


def get_user_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> UserService:
    return UserService(data_access)


def get_donation_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> DonationService:
    return DonationService(data_access)


def get_verification_service(
    data_access: DynamoDataAccess = Depends(get_data_access)
) -> VerificationService:
    return VerificationService(data_access)


async def require_admin(
    request: Request,
    x_admin_key: str | None = Header(default=None)
) -> None:
    expected = request.app.state.settings.ADMIN_API_KEY
    if not expected:
        return
    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        raise UnauthorizedError("Admin key required")
