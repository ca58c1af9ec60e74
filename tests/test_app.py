import json
import logging

from botocore.exceptions import ClientError

from lifelink.core.logging_config import JsonFormatter, RequestContextFilter, request_context
from lifelink.data_access.dynamodb import DynamoDataAccess
from payloads import organ_donor_payload


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to the Lifelink API"}


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert "error" in response.json()


def test_malformed_body_is_a_bad_request(client):
    response = client.post("/api/blood-donor", json={"age": "not a number"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("age")


def test_database_errors_are_passed_through(client, monkeypatch):
    def broken(self, kind, **equals):
        raise ClientError({"Error": {"Code": "InternalServerError", "Message": "table on fire"}}, "Query")
    monkeypatch.setattr(DynamoDataAccess, "find_records", broken)

    response = client.get("/api/blood-donors")

    assert response.status_code == 500
    assert "table on fire" in response.json()["error"]


def test_cors_preflight(client):
    response = client.options("/api/blood-donor", headers={
        "Origin": "http://localhost:5173",
        "Access-Control-Request-Method": "POST",
    })

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:5173")


def test_json_formatter():
    record = logging.LogRecord("lifelink.test", logging.WARNING, __file__, 10, "hello %s", ("world",), None)

    line = json.loads(JsonFormatter().format(record))

    assert line["level"] == "WARNING"
    assert line["message"] == "hello world"
    assert line["logger"] == "lifelink.test"
    assert "request" not in line


def test_json_formatter_adds_request_context():
    record = logging.LogRecord("lifelink.test", logging.INFO, __file__, 10, "inside", (), None)
    token = request_context.set("GET /api/blood-donors")
    try:
        RequestContextFilter().filter(record)
    finally:
        request_context.reset(token)

    line = json.loads(JsonFormatter().format(record))

    assert line["request"] == "GET /api/blood-donors"


class CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_records_logged_during_a_request_name_it(client):
    handler = CollectingHandler()
    handler.addFilter(RequestContextFilter())
    service_logger = logging.getLogger("lifelink")
    previous_level = service_logger.level
    service_logger.addHandler(handler)
    service_logger.setLevel(logging.INFO)
    try:
        client.post("/api/organ-donor", json=organ_donor_payload(userId="no-such-user"))
    finally:
        service_logger.removeHandler(handler)
        service_logger.setLevel(previous_level)

    assert handler.records
    assert {record.request for record in handler.records} == {"POST /api/organ-donor"}
    assert request_context.get() is None
