"""
Tests for payment initiation, the gateway callback and the Daraja client.
"""

import base64
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from techserve.models.auth import Role
from techserve.queries import appointment_queries, payment_queries
from techserve.routes import payments as payment_routes
from techserve.services.mpesa import DarajaClient, PaymentGatewayError


def payment_row(**overrides):
    row = {
        "id": 1,
        "appointment_id": 1,
        "transaction_id": "ws_CO_123",
        "amount": 1500.0,
        "status": "PENDING",
    }
    row.update(overrides)
    return row


def callback(result_code, checkout_id="ws_CO_123"):
    return {
        "Body": {
            "stkCallback": {
                "MerchantRequestID": "29115-34620561-1",
                "CheckoutRequestID": checkout_id,
                "ResultCode": result_code,
                "ResultDesc": "The service request is processed successfully.",
            }
        }
    }


class TestInitiate:
    async def test_stores_pending_payment_under_checkout_id(
        self, client, login_as, monkeypatch, make_appointment
    ):
        appointment = make_appointment()
        login_as(Role.USER, appointment["client_id"])
        monkeypatch.setattr(appointment_queries, "get_appointment", AsyncMock(return_value=appointment))
        create = AsyncMock(side_effect=lambda conn, appointment_id, transaction_id, amount: payment_row(
            appointment_id=appointment_id, transaction_id=transaction_id, amount=amount
        ))
        monkeypatch.setattr(payment_queries, "create_payment", create)

        response = await client.post(
            "/payments/", json={"appointmentId": 1, "amount": 1500, "phoneNumber": "254712345678"}
        )

        assert response.status_code == 201
        payment = response.json()["payment"]
        assert payment["status"] == "PENDING"
        assert payment["transactionId"].startswith("ws_CO_")

    async def test_missing_appointment(self, client, login_as, monkeypatch):
        login_as(Role.USER)
        monkeypatch.setattr(appointment_queries, "get_appointment", AsyncMock(return_value=None))

        response = await client.post(
            "/payments/", json={"appointmentId": 42, "amount": 1500, "phoneNumber": "254712345678"}
        )

        assert response.status_code == 404

    async def test_amount_must_be_positive(self, client, login_as):
        login_as(Role.USER)

        response = await client.post(
            "/payments/", json={"appointmentId": 1, "amount": 0, "phoneNumber": "254712345678"}
        )

        assert response.status_code == 400

    async def test_gateway_failure(self, client, login_as, monkeypatch, make_appointment):
        appointment = make_appointment()
        login_as(Role.USER, appointment["client_id"])
        monkeypatch.setattr(appointment_queries, "get_appointment", AsyncMock(return_value=appointment))
        monkeypatch.setattr(
            payment_routes.daraja_client,
            "initiate_payment",
            AsyncMock(side_effect=PaymentGatewayError("timeout")),
        )
        create = AsyncMock()
        monkeypatch.setattr(payment_queries, "create_payment", create)

        response = await client.post(
            "/payments/", json={"appointmentId": 1, "amount": 1500, "phoneNumber": "254712345678"}
        )

        assert response.status_code == 502
        create.assert_not_awaited()

    async def test_simulated_payment_completes_immediately(
        self, client, login_as, monkeypatch, make_appointment
    ):
        appointment = make_appointment()
        login_as(Role.TECHNICIAN, appointment["technician_id"])
        monkeypatch.setattr(appointment_queries, "get_appointment", AsyncMock(return_value=appointment))
        create = AsyncMock(return_value=payment_row(transaction_id="DARAJA_ab12", status="COMPLETED"))
        monkeypatch.setattr(payment_queries, "create_payment", create)

        response = await client.post(
            "/payments/simulate", json={"appointmentId": 1, "amount": 1500, "phoneNumber": "254712345678"}
        )

        assert response.status_code == 201
        assert create.await_args.args[2].startswith("DARAJA_")
        assert create.await_args.kwargs["status"] == "COMPLETED"


class TestCallback:
    @pytest.mark.parametrize("result_code, expected", [(0, "COMPLETED"), (1032, "FAILED"), (1, "FAILED")])
    async def test_result_code_decides_status(self, client, monkeypatch, result_code, expected):
        settle = AsyncMock(return_value=payment_row(status=expected))
        monkeypatch.setattr(payment_queries, "get_payment_by_transaction", AsyncMock(return_value=payment_row()))
        monkeypatch.setattr(payment_queries, "settle_payment", settle)

        response = await client.post("/payments/callback", json=callback(result_code))

        assert response.status_code == 200
        assert response.json()["message"] == f"Payment {expected}"
        assert settle.await_args.args[1:] == ("ws_CO_123", expected)

    async def test_unknown_transaction(self, client, monkeypatch):
        monkeypatch.setattr(payment_queries, "get_payment_by_transaction", AsyncMock(return_value=None))

        response = await client.post("/payments/callback", json=callback(0, "ws_CO_missing"))

        assert response.status_code == 404

    async def test_repeated_callback_leaves_payment_alone(self, client, monkeypatch):
        monkeypatch.setattr(
            payment_queries,
            "get_payment_by_transaction",
            AsyncMock(return_value=payment_row(status="COMPLETED")),
        )
        monkeypatch.setattr(payment_queries, "settle_payment", AsyncMock(return_value=None))

        response = await client.post("/payments/callback", json=callback(1))

        assert response.status_code == 200
        assert response.json()["message"] == "Payment already COMPLETED"

    async def test_settle_only_touches_pending_rows(self, conn):
        conn.fetchrow.return_value = None

        assert await payment_queries.settle_payment(conn, "ws_CO_123", "FAILED") is None
        assert "status = 'PENDING'" in conn.fetchrow.await_args.args[0]


class TestGetPayment:
    async def test_participant_reads(self, client, login_as, monkeypatch, make_appointment):
        appointment = make_appointment()
        login_as(Role.USER, appointment["client_id"])
        monkeypatch.setattr(payment_queries, "get_payment_by_id", AsyncMock(return_value=payment_row(
            client_id=appointment["client_id"], technician_id=appointment["technician_id"]
        )))

        response = await client.get("/payments/1")

        assert response.status_code == 200
        assert response.json()["transactionId"] == "ws_CO_123"

    async def test_outsider_is_refused(self, client, login_as, monkeypatch, make_appointment):
        appointment = make_appointment()
        login_as(Role.USER)
        monkeypatch.setattr(payment_queries, "get_payment_by_id", AsyncMock(return_value=payment_row(
            client_id=appointment["client_id"], technician_id=appointment["technician_id"]
        )))

        response = await client.get("/payments/1")

        assert response.status_code == 403


class TestDarajaClient:
    async def test_simulated_push_returns_checkout_id(self):
        daraja = DarajaClient(simulate=True)

        result = await daraja.initiate_payment(100, "254712345678", "APPT-1", "https://cb.test")

        assert result.checkout_request_id.startswith("ws_CO_")

    async def test_live_push_authenticates_then_posts(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path == "/oauth/v1/generate":
                return httpx.Response(200, json={"access_token": "tok", "expires_in": "3599"})
            return httpx.Response(200, json={
                "MerchantRequestID": "m-1",
                "CheckoutRequestID": "ws_CO_live",
                "CustomerMessage": "Success",
            })

        daraja = DarajaClient(
            base_url="https://daraja.test",
            consumer_key="key",
            consumer_secret="secret",
            short_code="174379",
            passkey="pass",
            simulate=False,
            transport=httpx.MockTransport(handler),
        )

        result = await daraja.initiate_payment(100, "254712345678", "APPT-1", "https://cb.test")

        assert result.checkout_request_id == "ws_CO_live"
        oauth, push = seen
        assert oauth.headers["Authorization"] == "Basic " + base64.b64encode(b"key:secret").decode()
        assert push.headers["Authorization"] == "Bearer tok"
        body = json.loads(push.content)
        assert body["BusinessShortCode"] == "174379"
        assert body["CallBackURL"] == "https://cb.test"
        assert base64.b64decode(body["Password"]).decode() == f"174379pass{body['Timestamp']}"

    async def test_gateway_error_is_wrapped(self):
        daraja = DarajaClient(
            base_url="https://daraja.test",
            simulate=False,
            transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        )

        with pytest.raises(PaymentGatewayError):
            await daraja.initiate_payment(100, "254712345678", "APPT-1", "https://cb.test")

    @pytest.mark.parametrize(
        "push_reply",
        [
            httpx.Response(200, text="<html>maintenance</html>"),
            httpx.Response(200, json={"errorCode": "500.001.1001", "errorMessage": "Invalid"}),
        ],
    )
    async def test_malformed_reply_is_wrapped(self, push_reply):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/oauth/v1/generate":
                return httpx.Response(200, json={"access_token": "tok"})
            return push_reply

        daraja = DarajaClient(
            base_url="https://daraja.test",
            simulate=False,
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(PaymentGatewayError):
            await daraja.initiate_payment(100, "254712345678", "APPT-1", "https://cb.test")


async def test_malformed_gateway_reply_is_bad_gateway(client, login_as, monkeypatch, make_appointment):
    appointment = make_appointment()
    login_as(Role.USER, appointment["client_id"])
    monkeypatch.setattr(appointment_queries, "get_appointment", AsyncMock(return_value=appointment))
    daraja = DarajaClient(
        base_url="https://daraja.test",
        simulate=False,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"access_token": "tok"})),
    )
    monkeypatch.setattr(payment_routes, "daraja_client", daraja)

    response = await client.post(
        "/payments/", json={"appointmentId": 1, "amount": 1500, "phoneNumber": "254712345678"}
    )

    assert response.status_code == 502
