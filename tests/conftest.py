import pytest


@pytest.fixture
def scenario_a():
    """Reference record whose canonical digest is anchored on the ledger in most tests."""
    return {
        "firstName": "Jane",
        "lastName": "Doe",
        "contactNumber": "5551234567",
        "gender": "F",
        "category": "TypeA",
        "age": 34,
        "email": "jane@x.com",
        "timestamp": 1700000000,
    }
