"""
Flutterwave payment gateway client

Stateless: every method is one outbound call with a bearer secret. Gateway
and transport failures raise PaymentError; its details keep the gateway's
status code and response body.
"""

import logging
import time
from typing import Any, Optional

import httpx
from fastapi import Request

from gamification.core.config import Config
from gamification.core.errors import PaymentError

logger = logging.getLogger(__name__)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class PaymentService:
    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.flutterwave.com/v3",
        currency: str = "USD",
        redirect_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.currency = currency
        self.redirect_url = redirect_url
        self.client = client or httpx.AsyncClient(timeout=30.0)

    @classmethod
    def from_config(cls, settings: Config, client: Optional[httpx.AsyncClient] = None) -> "PaymentService":
        return cls(
            secret_key=settings.FLUTTERWAVE_SECRET_KEY,
            base_url=settings.FLUTTERWAVE_BASE_URL,
            currency=settings.PAYMENT_CURRENCY,
            redirect_url=settings.PAYMENT_REDIRECT_URL,
            client=client,
        )

    async def _request(self, method: str, path: str, action: str, **kwargs) -> Any:
        try:
            response = await self.client.request(
                method,
                f"{self.base_url}{path}",
                headers={"Authorization": f"Bearer {self.secret_key}"},
                **kwargs,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            details = {"status": e.response.status_code, "gateway": _response_body(e.response)}
            logger.error("%s rejected by gateway: %s", action, details)
            raise PaymentError(f"{action} failed", details=details) from e
        except httpx.HTTPError as e:
            logger.error("%s failed: %s", action, e)
            raise PaymentError(f"{action} failed", details={"error": str(e)}) from e
        except ValueError as e:
            logger.error("%s returned a non-JSON response: %s", action, e)
            raise PaymentError(f"{action} failed", details={"error": "Invalid gateway response"}) from e

    # ==================== PAYMENTS ====================

    async def process_payment(self, user_id: str, card_token: str, amount: float, course_id: Optional[str] = None) -> dict:
        payload = {
            "tx_ref": f"TX-{int(time.time() * 1000)}",
            "amount": amount,
            "currency": self.currency,
            "redirect_url": self.redirect_url,
            "payment_type": "card",
            "card": {"token": card_token},
            "customer": {"id": user_id},
        }
        if course_id:
            payload["meta"] = {"courseId": course_id}

        logger.info("Processing payment %s for user %s", payload["tx_ref"], user_id)
        return await self._request("POST", "/payments", "Payment processing", json=payload)

    async def verify_payment(self, transaction_id: str) -> dict:
        return await self._request("GET", f"/transactions/{transaction_id}/verify", "Payment verification")

    # ==================== CARDS ====================

    async def charge_card(self, data: dict) -> dict:
        return await self._request("POST", "/charges", "Card charge", params={"type": "card"}, json=data)

    async def save_card(self, data: dict) -> dict:
        return await self._request("POST", "/tokens", "Saving card", json=data)

    async def delete_card(self, card_token: str) -> dict:
        return await self._request("DELETE", f"/tokens/{card_token}", "Deleting card")

    async def close(self):
        await self.client.aclose()


def get_payment_service(request: Request) -> PaymentService:
    """Payment service dependency"""
    return request.app.state.payment_service
