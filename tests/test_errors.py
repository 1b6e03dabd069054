import pytest
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError, OperationFailure

from neoride.core.errors import (
    ConnectionExhaustedError,
    DuplicateKeyError,
    NotFoundError,
    StorageError,
)
from neoride.repositories.base import DocumentRepository


@pytest.mark.parametrize(
    "details, message, field",
    [
        ({"keyPattern": {"email": 1}, "keyValue": {"email": "a@b.com"}}, "E11000", "email"),
        ({"keyValue": {"vehiclePlate": "ABC123"}}, "E11000", "vehiclePlate"),
        (
            None,
            "E11000 duplicate key error collection: NeoRide.drivers index: licenseNumber_1 dup key: { licenseNumber: \"L1\" }",
            "licenseNumber",
        ),
        (None, "E11000 Duplicate Key Error", None),
    ],
)
def test_duplicate_field_from_driver_error(details, message, field):
    error = MongoDuplicateKeyError(message, 11000, details)

    assert DocumentRepository._field_from_error(error) == field


def test_error_bodies():
    assert DuplicateKeyError("Driver", "email").to_response() == {
        "error": "Driver already exists",
        "field": "email",
    }
    assert NotFoundError("Customer", "u1").status_code == 404
    assert StorageError("disk full").to_response() == {"error": "disk full"}


def test_exhausted_error_body():
    error = ConnectionExhaustedError(3, RuntimeError("timed out"))

    assert error.status_code == 500
    assert error.to_response() == {
        "error": "Could not connect to MongoDB after 3 attempts: timed out",
        "code": "ConnectionExhausted",
        "attempts": 3,
    }


# ============================================================================
# Storage failures other than duplicates answer 500 with the driver's message
# ============================================================================

@pytest.mark.parametrize(
    "method, verb, path",
    [
        ("insert_one", "POST", "/api/customers"),
        ("find_one", "GET", "/api/customers/u1"),
        ("replace_one", "PUT", "/api/customers/u1"),
        ("delete_one", "DELETE", "/api/customers/u1"),
        ("count_documents", "GET", "/api/stats"),
    ],
)
def test_storage_failure_maps_to_500(client, client_factory, customer_payload, method, verb, path):
    if method != "insert_one":
        assert client.post("/api/customers", json=customer_payload).status_code == 201
    client_factory.latest.collection_errors[method] = OperationFailure("disk full")

    if verb in ("POST", "PUT"):
        response = client.request(verb, path, json=customer_payload)
    else:
        response = client.request(verb, path)

    assert response.status_code == 500
    assert response.json() == {"error": "disk full"}


def test_driver_storage_failure_maps_to_500(client, client_factory, driver_payload):
    client.post("/api/drivers", json=driver_payload)
    client_factory.latest.collection_errors["replace_one"] = OperationFailure("not primary")

    response = client.put("/api/drivers/d1", json={"isOnline": True})

    assert response.status_code == 500
    assert response.json() == {"error": "not primary"}
