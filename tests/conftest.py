import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from lifelink.api.main import create_app
from lifelink.core.config import Settings
from lifelink.data_access.dynamodb import DynamoDataAccess, create_table

TABLE_NAME = "lifelink-test"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def table():
    with mock_aws():
        resource = boto3.resource("dynamodb", region_name="us-east-1")
        yield create_table(resource, TABLE_NAME)


@pytest.fixture
def data_access(table):
    return DynamoDataAccess(table)


@pytest.fixture
def settings():
    return Settings(_env_file=None, DYNAMODB_TABLE_NAME=TABLE_NAME, ADMIN_API_KEY=None)


@pytest.fixture
def client(settings, data_access):
    with TestClient(create_app(settings, data_access)) as test_client:
        yield test_client


@pytest.fixture
def register_user(client):
    def _register(phone="9876543210", password="s3cret-pass", name="Asha"):
        response = client.post("/api/register", json={
            "name": name,
            "phone": phone,
            "password": password,
            "profilePhoto": "photos/asha.png",
        })
        assert response.status_code == 201, response.json()
        return response.json()["user"]
    return _register


@pytest.fixture
def submit(client):
    """POST a submission and return the new record id."""
    def _submit(path, payload):
        response = client.post(f"/api/{path}", json=payload)
        assert response.status_code == 201, response.json()
        body = response.json()
        return body.get("donorId") or body.get("receiverId")
    return _submit


@pytest.fixture
def decide(client):
    def _decide(kind, record_id, status="approved", notes=None):
        response = client.post("/api/admin/verify", json={
            "type": kind,
            "id": record_id,
            "status": status,
            "notes": notes,
        })
        assert response.status_code == 200, response.json()
        return response.json()["record"]
    return _decide
