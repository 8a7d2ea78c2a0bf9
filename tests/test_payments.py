import json

import httpx
import pytest

from gamification.core.errors import PaymentError
from gamification.payments.payment_service import PaymentService

from conftest import auth_headers, missing_id


async def test_process_payment_request(payment_service, gateway):
    course_id = missing_id()

    result = await payment_service.process_payment("user-1", "flw-t1nf-123", 25.0, course_id)

    assert result == gateway.body
    request = gateway.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://gateway.test/v3/payments"
    assert request.headers["Authorization"] == "Bearer FLWSECK_TEST"

    payload = json.loads(request.content)
    assert payload["tx_ref"].startswith("TX-")
    assert payload["amount"] == 25.0
    assert payload["currency"] == "USD"
    assert payload["card"] == {"token": "flw-t1nf-123"}
    assert payload["meta"] == {"courseId": course_id}


async def test_gateway_error_payload_is_preserved(payment_service, gateway):
    gateway.status_code = 400
    gateway.body = {"status": "error", "message": "Card declined"}

    with pytest.raises(PaymentError) as exc_info:
        await payment_service.verify_payment("12345")

    assert exc_info.value.status_code == 502
    assert exc_info.value.details == {"status": 400, "gateway": {"status": "error", "message": "Card declined"}}


async def test_transport_error_becomes_payment_error():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = PaymentService("sk", client=httpx.AsyncClient(transport=httpx.MockTransport(unreachable)))

    with pytest.raises(PaymentError) as exc_info:
        await service.delete_card("tok")

    assert exc_info.value.details == {"error": "connection refused"}
    await service.close()


async def test_card_endpoints(payment_service, gateway):
    await payment_service.charge_card({"amount": 5})
    await payment_service.save_card({"token": "tok"})
    await payment_service.delete_card("tok")

    assert [(r.method, r.url.path, r.url.query) for r in gateway.requests] == [
        ("POST", "/v3/charges", b"type=card"),
        ("POST", "/v3/tokens", b""),
        ("DELETE", "/v3/tokens/tok", b""),
    ]

# ==================== ROUTES ====================

async def test_process_route(client, learner, gateway):
    response = await client.post(
        "/payment/process",
        json={"cardToken": "flw-t1nf-123", "amount": 10},
        headers=auth_headers(learner),
    )

    assert response.status_code == 200
    assert response.json()["data"] == gateway.body
    assert json.loads(gateway.requests[0].content)["customer"] == {"id": str(learner["_id"])}


async def test_gateway_failure_envelope(client, learner, gateway):
    gateway.status_code = 402
    gateway.body = {"status": "error", "message": "Insufficient funds"}

    response = await client.get("/payment/verify/99", headers=auth_headers(learner))

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["type"] == "PAYMENT_ERROR"
    assert error["details"]["status"] == 402
    assert error["details"]["gateway"]["message"] == "Insufficient funds"


async def test_charge_route_builds_charge(client, learner, gateway):
    response = await client.post(
        "/payment/charge",
        json={
            "amount": 15,
            "card": {"number": "5531886652142950", "cvv": "564", "expiry_month": "09", "expiry_year": "32"},
        },
        headers=auth_headers(learner),
    )

    assert response.status_code == 200
    charge = json.loads(gateway.requests[0].content)
    assert charge["redirect_url"] == "https://app.test/redirect"
    assert charge["customer"]["email"] == learner["email"]
    assert charge["card"]["cvv"] == "564"


async def test_save_and_delete_card_routes(client, learner):
    saved = await client.post("/payment/cards", json={"token": "tok"}, headers=auth_headers(learner))
    deleted = await client.delete("/payment/cards/tok", headers=auth_headers(learner))

    assert saved.status_code == 201
    assert deleted.status_code == 200


async def test_payment_validation(client, learner):
    response = await client.post(
        "/payment/process",
        json={"amount": 0, "courseId": "bad"},
        headers=auth_headers(learner),
    )

    assert response.status_code == 422
    assert response.json()["errors"] == [
        {"field": "cardToken", "message": "Please provide a card token"},
        {"field": "amount", "message": "Amount must be a positive number"},
        {"field": "courseId", "message": "Invalid course id"},
    ]


async def test_payments_are_for_learners(client, instructor):
    response = await client.post(
        "/payment/process",
        json={"cardToken": "tok", "amount": 10},
        headers=auth_headers(instructor),
    )

    assert response.status_code == 403
