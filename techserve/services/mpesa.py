"""
M-Pesa Daraja client for STK push payments.

With ``settings.mpesa_simulate`` on (the default) no request leaves the
process: a synthetic checkout id is returned and the payment completes or
fails later through the callback route, exactly as with the live gateway.
"""
import base64
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The gateway refused or failed the STK push."""


@dataclass
class StkPushResult:
    checkout_request_id: str
    merchant_request_id: Optional[str] = None
    customer_message: Optional[str] = None


class DarajaClient:
    def __init__(
        self,
        base_url: str = settings.mpesa_base_url,
        consumer_key: str = settings.mpesa_consumer_key,
        consumer_secret: str = settings.mpesa_consumer_secret,
        short_code: str = settings.mpesa_short_code,
        passkey: str = settings.mpesa_passkey,
        simulate: bool = settings.mpesa_simulate,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.short_code = short_code
        self.passkey = passkey
        self.simulate = simulate
        self.timeout = timeout
        self.transport = transport

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        credentials = base64.b64encode(
            f"{self.consumer_key}:{self.consumer_secret}".encode()
        ).decode()
        response = await client.get(
            f"{self.base_url}/oauth/v1/generate",
            params={"grant_type": "client_credentials"},
            headers={"Authorization": f"Basic {credentials}"},
        )
        response.raise_for_status()
        return response.json()["access_token"]

    def _password(self, timestamp: str) -> str:
        return base64.b64encode(
            f"{self.short_code}{self.passkey}{timestamp}".encode()
        ).decode()

    async def initiate_payment(
        self,
        amount: float,
        phone_number: str,
        account_reference: str,
        callback_url: str,
    ) -> StkPushResult:
        if self.simulate:
            checkout_id = f"ws_CO_{secrets.token_hex(10)}"
            logger.info(f"Simulated STK push of {amount} to {phone_number} ({account_reference}): {checkout_id}")
            return StkPushResult(
                checkout_request_id=checkout_id,
                customer_message="Success. Request accepted for processing",
            )

        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        payload = {
            "BusinessShortCode": self.short_code,
            "Password": self._password(timestamp),
            "Timestamp": timestamp,
            "TransactionType": "CustomerPayBillOnline",
            "Amount": amount,
            "PartyA": phone_number,
            "PartyB": self.short_code,
            "PhoneNumber": phone_number,
            "CallBackURL": callback_url,
            "AccountReference": account_reference,
            "TransactionDesc": "Payment for services",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                token = await self._access_token(client)
                response = await client.post(
                    f"{self.base_url}/mpesa/stkpush/v1/processrequest",
                    json=payload,
                    headers={"Authorization": f"Bearer {token}"},
                )
                response.raise_for_status()
                data = response.json()
                checkout_request_id = data["CheckoutRequestID"]
        except httpx.HTTPError as e:
            logger.error(f"STK push failed for {account_reference}: {str(e)}")
            raise PaymentGatewayError(str(e)) from e
        except (KeyError, ValueError) as e:
            logger.error(f"Unexpected STK push reply for {account_reference}: {str(e)}")
            raise PaymentGatewayError(f"Unexpected gateway reply: {str(e)}") from e

        return StkPushResult(
            checkout_request_id=checkout_request_id,
            merchant_request_id=data.get("MerchantRequestID"),
            customer_message=data.get("CustomerMessage"),
        )


def simulated_transaction_id() -> str:
    return f"DARAJA_{secrets.token_hex(8)}"


daraja_client = DarajaClient()
