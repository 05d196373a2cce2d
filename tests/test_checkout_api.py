from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from event_checkout.checkout.router import get_session_service
from event_checkout.checkout.session_service import CheckoutSessionService
from event_checkout.main import app

from conftest import FakeScriptProvider

SESSIONS = "/api/v1/checkout/sessions"

AMA = {
    "name": "Ama Boateng",
    "email": "ama@example.com",
    "ticket_type": "vip",
    "quantity": "2",
}


def make_client(auto_load=True):
    service = CheckoutSessionService(
        provider_factory=lambda: FakeScriptProvider(auto_load=auto_load),
        settle_delay=0
    )
    app.dependency_overrides[get_session_service] = lambda: service
    return TestClient(app)


@pytest.fixture
def client():
    with make_client() as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def stalled_client():
    with make_client(auto_load=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def open_ready_session(client):
    session = client.post(SESSIONS).json()
    gateway = client.get(f"{SESSIONS}/{session['session_id']}/gateway", params={"wait_seconds": 2}).json()
    assert gateway["ready"]
    return session["session_id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_catalog_and_quote(client):
    catalog = client.get("/api/v1/pricing/catalog").json()
    assert [entry["value"] for entry in catalog] == ["regular", "vip"]
    assert catalog[1]["display_label"] == "VIP Pass (GH₵150.00)"

    quote = client.get("/api/v1/pricing/quote", params={"ticket_type": "vip", "quantity": "2"}).json()
    assert quote["amount_minor_units"] == 30000
    assert Decimal(str(quote["display_amount"])) == Decimal("300.00")

    empty = client.get("/api/v1/pricing/quote", params={"ticket_type": "vip", "quantity": ""}).json()
    assert empty["amount_minor_units"] == 0


def test_new_session_starts_loading_then_becomes_ready(client):
    response = client.post(SESSIONS)
    assert response.status_code == 201
    session = response.json()
    assert session["state"] == "landing"
    assert session["gateway_readiness"] == "loading"
    assert session["buyer"]["quantity"] == "1"

    gateway = client.get(f"{SESSIONS}/{session['session_id']}/gateway", params={"wait_seconds": 2}).json()
    assert gateway["history"] == ["not_requested", "loading", "ready"]


def test_full_booking_flow(client):
    session_id = open_ready_session(client)
    base = f"{SESSIONS}/{session_id}"

    assert client.post(f"{base}/booking/open").json()["state"] == "modal_open"

    snapshot = client.patch(f"{base}/buyer", json=AMA).json()
    assert snapshot["quote"]["amount_minor_units"] == 30000
    assert snapshot["can_pay"]

    started = client.post(f"{base}/payment").json()
    launch = started["launch"]
    assert started["snapshot"]["state"] == "payment_in_progress"
    assert launch["amount"] == 30000
    assert launch["currency"] == "GHS"
    assert launch["email"] == "ama@example.com"
    assert "callback" not in launch

    repeated = client.post(f"{base}/payment").json()
    assert started["launched"]
    assert not repeated["launched"]
    assert repeated["launch"] is None
    assert repeated["snapshot"]["active_attempt"]["reference_id"] == launch["ref"]

    view = client.get(f"{base}/view").json()
    assert view["show_loading_overlay"]

    done = client.post(f"{base}/payment/callback", json={"ref": launch["ref"], "reference": "R1"}).json()
    assert done["state"] == "success"
    assert done["confirmation_reference"] == "R1"

    view = client.get(f"{base}/view").json()
    assert view["page"] == "success"
    assert not view["show_booking_modal"]

    landing = client.post(f"{base}/return").json()
    assert landing["state"] == "landing"
    assert landing["buyer"]["name"] == ""

    assert client.delete(base).status_code == 204
    assert client.get(base).status_code == 404


def test_cancel_keeps_details(client):
    session_id = open_ready_session(client)
    base = f"{SESSIONS}/{session_id}"
    client.post(f"{base}/booking/open")
    client.patch(f"{base}/buyer", json=AMA)
    ref = client.post(f"{base}/payment").json()["launch"]["ref"]

    snapshot = client.post(f"{base}/payment/cancel", json={"ref": ref}).json()

    assert snapshot["state"] == "modal_open"
    assert snapshot["buyer"]["name"] == "Ama Boateng"

    late = client.post(f"{base}/payment/callback", json={"ref": ref, "reference": "LATE"}).json()
    assert late["state"] == "modal_open"
    assert late["confirmation_reference"] is None


def test_zero_quantity_is_a_validation_error(client):
    session_id = open_ready_session(client)
    base = f"{SESSIONS}/{session_id}"
    client.post(f"{base}/booking/open")
    client.patch(f"{base}/buyer", json={**AMA, "quantity": "0"})

    response = client.post(f"{base}/payment")

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["message"] == "Please fill in all required fields."
    assert [error["field"] for error in detail["field_errors"]] == ["quantity"]
    assert client.get(base).json()["state"] == "modal_open"


def test_unknown_ticket_type_rejected(client):
    session_id = open_ready_session(client)
    response = client.patch(f"{SESSIONS}/{session_id}/buyer", json={"ticket_type": "backstage"})
    assert response.status_code == 400


def test_unknown_payment_ref_is_not_found(client):
    session_id = open_ready_session(client)
    response = client.post(f"{SESSIONS}/{session_id}/payment/cancel", json={"ref": "123"})
    assert response.status_code == 404


def test_invalid_transition_is_conflict(client):
    session_id = open_ready_session(client)
    client.post(f"{SESSIONS}/{session_id}/booking/open")

    response = client.post(f"{SESSIONS}/{session_id}/return")

    assert response.status_code == 409
    assert response.json()["detail"] == "Cannot return to the main page while checkout is modal_open"


def test_stalled_gateway_rejects_payment(stalled_client):
    session = stalled_client.post(SESSIONS).json()
    base = f"{SESSIONS}/{session['session_id']}"

    gateway = stalled_client.get(f"{base}/gateway", params={"wait_seconds": 0.05}).json()
    assert gateway["readiness"] == "loading"
    assert not gateway["ready"]

    stalled_client.post(f"{base}/booking/open")
    stalled_client.patch(f"{base}/buyer", json=AMA)
    response = stalled_client.post(f"{base}/payment")

    assert response.status_code == 409
    assert response.headers["retry-after"] == "1"
    assert response.json()["detail"] == "Payment service is still loading. Please try again in a moment."
    assert stalled_client.get(base).json()["state"] == "modal_open"

    assert stalled_client.delete(base).status_code == 204


def test_unknown_session_is_not_found(client):
    assert client.get(f"{SESSIONS}/missing").status_code == 404
