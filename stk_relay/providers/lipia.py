import logging
import math
from typing import Any, Dict, Optional

import httpx

from stk_relay.errors import ProviderError
from stk_relay.providers.base import BaseProvider, StkPushResult

logger = logging.getLogger(__name__)

STK_PUSH_PATH = "/request/stk"

# Lipia has spelled this field differently across API versions
REFERENCE_FIELDS = ("reference", "refference", "CheckoutRequestID")


class LipiaProvider(BaseProvider):
    """
    Lipia Online STK push client.
    Endpoint: POST {base_url}/request/stk
    Auth: Bearer API key
    Success: 2xx with a `data` object carrying the checkout reference
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def provider_name(self) -> str:
        return "lipia"

    async def stk_push(
        self,
        amount: float,
        phone_number: str,
        account_reference: str,
        transaction_desc: str,
    ) -> StkPushResult:
        payload = {
            "phone": phone_number,
            # M-Pesa charges whole shillings; round up so the amount stays positive
            "amount": str(math.ceil(amount)),
            "reference": account_reference,
            "description": transaction_desc,
        }
        try:
            data = await self._request(payload)
        except ProviderError as e:
            logger.warning("Lipia STK push failed for %s: %s", account_reference, e.message)
            return StkPushResult(success=False, message=e.message, error=e.detail)

        return StkPushResult(
            success=True,
            message=data.get("message") or "STK push sent successfully",
            reference=_extract_reference(data.get("data") or {}),
        )

    async def _request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send the STK push and return the decoded body.

        Raises:
            ProviderError: on timeout, transport failure, non-2xx or malformed body
        """
        try:
            resp = await self._client.post(STK_PUSH_PATH, json=payload)
        except httpx.TimeoutException as e:
            raise ProviderError("Payment provider timed out", detail=str(e)) from e
        except httpx.HTTPError as e:
            raise ProviderError("Payment provider unreachable", detail=str(e)) from e

        try:
            body = resp.json()
        except ValueError:
            raise ProviderError(
                f"Payment provider returned an invalid response (HTTP {resp.status_code})",
                detail=resp.text,
            )

        if not isinstance(body, dict):
            raise ProviderError("Payment provider returned an invalid response", detail=body)

        if resp.is_error:
            raise ProviderError(
                body.get("message") or f"Payment provider error (HTTP {resp.status_code})",
                detail=body,
            )
        if not isinstance(body.get("data"), dict):
            raise ProviderError(body.get("message") or "Failed to initiate payment", detail=body)

        return body

    async def aclose(self) -> None:
        await self._client.aclose()


def _extract_reference(data: Dict[str, Any]) -> Optional[str]:
    for field in REFERENCE_FIELDS:
        if data.get(field):
            return str(data[field])
    return None
