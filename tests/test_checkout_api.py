"""
HTTP tests for the checkout endpoints against the seeded catalogue.
"""
import pytest
from fastapi.testclient import TestClient

from checkout_pricing.api.main import create_app
from checkout_pricing.engine.errors import (
    INTERNAL_ERROR_MESSAGE,
    INVALID_BODY_MESSAGE,
    UNKNOWN_ITEM_MESSAGE,
)
from checkout_pricing.services.checkout_service import CheckoutService


@pytest.mark.parametrize("body,expected", [
    (
        {"code": "A", "quantity": 1},
        {"subtotals": [{"code": "A", "quantity": 1, "subtotal": 50}], "total": 50},
    ),
    (
        [{"code": "A", "quantity": 1}, {"code": "B", "quantity": 1}],
        {"subtotals": [
            {"code": "A", "quantity": 1, "subtotal": 50},
            {"code": "B", "quantity": 1, "subtotal": 35},
        ], "total": 85},
    ),
    (
        {"code": "A", "quantity": 3},
        {"subtotals": [{"code": "A", "quantity": 3, "subtotal": 140}], "total": 140},
    ),
    (
        [{"code": "A", "quantity": 3}, {"code": "B", "quantity": 2}],
        {"subtotals": [
            {"code": "A", "quantity": 3, "subtotal": 140},
            {"code": "B", "quantity": 2, "subtotal": 60},
        ], "total": 200},
    ),
])
def test_checkout_scenarios(client, body, expected):
    res = client.post("/checkout", json=body)

    assert res.status_code == 200
    assert res.json() == expected


@pytest.mark.parametrize("path", ["/", "/checkout"])
def test_both_routes_share_the_pipeline(client, path):
    res = client.post(path, json=[{"code": "C", "quantity": 2}, {"code": "D", "quantity": 5}])

    assert res.status_code == 200
    assert res.json()["total"] == 110


@pytest.mark.parametrize("body", [
    {"code": "A"},
    {},
    [],
    {"code": "A", "quantity": "1"},
    {"code": "A", "quantity": 0},
    [{"code": "A", "quantity": 1}, {"code": "B", "quantity": "2"}],
], ids=repr)
def test_invalid_body_is_bad_request(client, body):
    res = client.post("/checkout", json=body)

    assert res.status_code == 400
    assert res.json()["error"].startswith("Invalid request body")


@pytest.mark.parametrize("body", [
    {"code": "L", "quantity": 1},
    [{"code": "L", "quantity": 4}],
    [{"code": "A", "quantity": 1}, {"code": "L", "quantity": 1}],
])
def test_unknown_code_is_bad_request(client, body):
    res = client.post("/checkout", json=body)

    assert res.status_code == 400
    assert res.json() == {"error": UNKNOWN_ITEM_MESSAGE}
    assert "L" not in res.json()["error"].split()


def test_malformed_json_is_bad_request(client):
    res = client.post("/checkout", content=b'{"code": "A", ', headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert res.json()["error"].startswith("Invalid request body")


@pytest.mark.parametrize("raw", [
    b'{"code": "\xff\xfe", "quantity": 1}',
    b'{"code": "A", "quantity": ' + b"9" * 5000 + b"}",
], ids=["invalid-utf8", "oversized-integer"])
def test_unparseable_body_is_bad_request(client, raw):
    res = client.post("/checkout", content=raw, headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert res.json() == {"error": INVALID_BODY_MESSAGE}


def test_routing_errors_use_error_shape(client):
    missing = client.post("/nowhere", json={"code": "A", "quantity": 1})
    wrong_method = client.get("/checkout")

    assert missing.status_code == 404
    assert set(missing.json()) == {"error"}
    assert wrong_method.status_code == 405
    assert set(wrong_method.json()) == {"error"}
    assert "POST" in wrong_method.headers["allow"]


def test_missing_body_is_bad_request(client):
    res = client.post("/checkout")

    assert res.status_code == 400


def test_repeated_codes_are_merged(client):
    res = client.post("/checkout", json=[{"code": "A", "quantity": 1}, {"code": "A", "quantity": 1}])

    assert res.status_code == 200
    assert res.json() == {"subtotals": [{"code": "A", "quantity": 2, "subtotal": 100}], "total": 100}


def test_repeated_codes_can_complete_a_bundle(client):
    res = client.post("/checkout", json=[{"code": "A", "quantity": 2}, {"code": "A", "quantity": 1}])

    assert res.json()["subtotals"] == [{"code": "A", "quantity": 3, "subtotal": 140}]


def test_subtotals_follow_catalogue_order(client):
    res = client.post("/checkout", json=[{"code": "D", "quantity": 1}, {"code": "A", "quantity": 1}])

    assert [s["code"] for s in res.json()["subtotals"]] == ["A", "D"]


@pytest.mark.parametrize("quantities", [
    {"A": 7, "B": 5, "C": 3, "D": 11},
    {"A": 1, "B": 2},
    {"B": 9},
    {"A": 12, "D": 1},
])
def test_total_is_sum_of_subtotals_and_lines_round_trip(client, quantities):
    body = [{"code": code, "quantity": qty} for code, qty in quantities.items()]
    data = client.post("/checkout", json=body).json()

    assert data["total"] == sum(s["subtotal"] for s in data["subtotals"])

    for line in data["subtotals"]:
        single = client.post("/checkout", json={"code": line["code"], "quantity": line["quantity"]}).json()
        assert single["subtotals"] == [line]
        assert single["total"] == line["subtotal"]


def test_catalogue_listing(client):
    res = client.get("/catalogue")

    assert res.status_code == 200
    assert res.json() == [
        {"code": "A", "unit_price": 50, "discount": {"quantity": 3, "price": 140}},
        {"code": "B", "unit_price": 35, "discount": {"quantity": 2, "price": 60}},
        {"code": "C", "unit_price": 25, "discount": None},
        {"code": "D", "unit_price": 12, "discount": None},
    ]


def test_health(client):
    assert client.get("/health").json()["status"] == "online"


class BrokenCatalogue:
    """Catalogue whose store is unreachable."""

    def lookup(self, codes):
        raise RuntimeError("database is locked at /var/lib/secret.sqlite")

    def all_items(self):
        raise RuntimeError("database is locked at /var/lib/secret.sqlite")


def test_unexpected_errors_are_hidden_from_the_client():
    client = TestClient(create_app(checkout_service=CheckoutService(BrokenCatalogue())))

    res = client.post("/checkout", json={"code": "A", "quantity": 1})

    assert res.status_code == 500
    assert res.json() == {"error": INTERNAL_ERROR_MESSAGE}
    assert "secret" not in res.text


def test_validation_runs_before_the_catalogue_is_touched():
    client = TestClient(create_app(checkout_service=CheckoutService(BrokenCatalogue())))

    res = client.post("/checkout", json={"code": "A"})

    assert res.status_code == 400


def test_internal_errors_carry_cors_headers():
    client = TestClient(create_app(checkout_service=CheckoutService(BrokenCatalogue())))

    res = client.post(
        "/checkout",
        json={"code": "A", "quantity": 1},
        headers={"Origin": "http://shop.example"},
    )

    assert res.status_code == 500
    assert res.headers["access-control-allow-origin"] == "*"
