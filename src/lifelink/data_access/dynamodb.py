import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from pydantic import BaseModel

from lifelink.models.records import RECORD_MODELS, RecordKind, VerifiableRecord
from lifelink.models.user import DonationLogEntry, User

logger = logging.getLogger(__name__)

USER_PK = "USER"
PHONE_PREFIX = "PHONE#"
PHONE_SK = "USER"
KIND_PREFIX = "KIND#"


def to_item(model: BaseModel) -> dict:
    # boto3 refuses floats, numbers have to travel as Decimal
    return json.loads(
        model.model_dump_json(by_alias=True, exclude_none=True),
        parse_float=Decimal
    )


def is_condition_failure(error: ClientError) -> bool:
    return error.response['Error']['Code'] == 'ConditionalCheckFailedException'


def create_table(dynamo_resource, table_name: str):
    """Create the single table holding users and all six record kinds."""
    table = dynamo_resource.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    logger.info(f"Created DynamoDB table {table_name}")
    return table


class DynamoDataAccess:
    def __init__(self, table):
        self.table = table

    def close(self) -> None:
        self.table.meta.client.close()

    def _query_all(self, pk: str, filter_expression=None) -> list[dict]:
        kwargs: dict[str, Any] = {"KeyConditionExpression": Key("PK").eq(pk)}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression

        items = []
        while True:
            response = self.table.query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    # Users

    def claim_phone(self, phone: str, user_id: str) -> bool:
        """Reserve ``phone`` for ``user_id``; False when another user holds it."""
        try:
            self.table.put_item(
                Item={
                    "PK": f"{PHONE_PREFIX}{phone}",
                    "SK": PHONE_SK,
                    "userId": user_id,
                },
                ConditionExpression="attribute_not_exists(PK) OR userId = :uid",
                ExpressionAttributeValues={":uid": user_id}
            )
            return True
        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Phone {phone} is already claimed by another user")
                return False
            raise

    def release_phone(self, phone: str, user_id: str) -> None:
        try:
            self.table.delete_item(
                Key={"PK": f"{PHONE_PREFIX}{phone}", "SK": PHONE_SK},
                ConditionExpression="userId = :uid",
                ExpressionAttributeValues={":uid": user_id}
            )
        except ClientError as e:
            if not is_condition_failure(e):
                raise

    def create_user(self, user: User) -> User:
        self.table.put_item(Item={"PK": USER_PK, "SK": user.id, **to_item(user)})
        return user

    def get_user(self, user_id: str) -> User | None:
        response = self.table.get_item(Key={"PK": USER_PK, "SK": user_id})
        item = response.get("Item")
        return User.model_validate(item) if item else None

    def get_user_by_phone(self, phone: str) -> User | None:
        response = self.table.get_item(Key={"PK": f"{PHONE_PREFIX}{phone}", "SK": PHONE_SK})
        claim = response.get("Item")
        if not claim:
            return None
        return self.get_user(claim["userId"])

    def list_users(self) -> list[User]:
        return [User.model_validate(item) for item in self._query_all(USER_PK)]

    def update_user(self, user_id: str, changes: dict[str, Any]) -> User | None:
        if not changes:
            return self.get_user(user_id)

        names = {}
        values = {}
        assignments = []
        for index, (field, value) in enumerate(changes.items()):
            attribute = User.model_fields[field].alias or field
            names[f"#f{index}"] = attribute
            values[f":v{index}"] = value
            assignments.append(f"#f{index} = :v{index}")

        try:
            response = self.table.update_item(
                Key={"PK": USER_PK, "SK": user_id},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="attribute_exists(PK)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW"
            )
        except ClientError as e:
            if is_condition_failure(e):
                return None
            raise
        return User.model_validate(response["Attributes"])

    def append_donation(self, user_id: str, entry: DonationLogEntry) -> bool:
        """Append to the user's donation log. False when the user does not exist."""
        try:
            self.table.update_item(
                Key={"PK": USER_PK, "SK": user_id},
                UpdateExpression="SET donations = list_append(if_not_exists(donations, :empty), :entry)",
                ConditionExpression="attribute_exists(PK)",
                ExpressionAttributeValues={
                    ":empty": [],
                    ":entry": [to_item(entry)]
                }
            )
            return True
        except ClientError as e:
            if is_condition_failure(e):
                return False
            raise

    # Donor and receiver records

    def put_record(self, record: VerifiableRecord) -> VerifiableRecord:
        self.table.put_item(
            Item={"PK": f"{KIND_PREFIX}{record.kind.value}", "SK": record.id, **to_item(record)}
        )
        return record

    def get_record(self, kind: RecordKind, record_id: str) -> VerifiableRecord | None:
        response = self.table.get_item(Key={"PK": f"{KIND_PREFIX}{kind.value}", "SK": record_id})
        item = response.get("Item")
        return RECORD_MODELS[kind].model_validate(item) if item else None

    def find_records(self, kind: RecordKind, **equals: Any) -> list[VerifiableRecord]:
        """
        Every record of ``kind`` whose fields equal the given values.

        Keyword names are the python field names of the kind's model.
        """
        model = RECORD_MODELS[kind]
        condition = None
        for field, value in equals.items():
            clause = Attr(model.model_fields[field].alias or field).eq(value)
            condition = clause if condition is None else condition & clause

        items = self._query_all(f"{KIND_PREFIX}{kind.value}", condition)
        return [model.model_validate(item) for item in items]

    def update_verification(
        self,
        kind: RecordKind,
        record_id: str,
        status: str,
        notes: str,
        verified_at: datetime
    ) -> VerifiableRecord | None:
        """
        Record an admin decision on a pending record.

        Returns None when the record is missing or no longer pending.
        """
        try:
            response = self.table.update_item(
                Key={"PK": f"{KIND_PREFIX}{kind.value}", "SK": record_id},
                UpdateExpression=(
                    "SET verificationStatus = :s, verifiedAt = :at, "
                    "isVerified = :v, adminNotes = :n"
                ),
                ConditionExpression="attribute_exists(PK) AND verificationStatus = :pending",
                ExpressionAttributeValues={
                    ":s": status,
                    ":at": verified_at.isoformat(),
                    ":v": status == "approved",
                    ":n": notes,
                    ":pending": "pending"
                },
                ReturnValues="ALL_NEW"
            )
        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Idempotency check: {kind.value} {record_id} is not pending.")
                return None
            logger.error(f"Error updating verification status: {e}")
            raise
        return RECORD_MODELS[kind].model_validate(response["Attributes"])
