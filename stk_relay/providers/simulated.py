import hashlib
import logging

from stk_relay.providers.base import BaseProvider, StkPushResult

logger = logging.getLogger(__name__)


class SimulatedProvider(BaseProvider):
    """
    Demo-mode provider used when no Lipia credentials are configured.
    No network access. The reference is derived from the inputs, so the
    same request always yields the same response.
    """

    @property
    def provider_name(self) -> str:
        return "lipia"

    @property
    def demo_mode(self) -> bool:
        return True

    async def stk_push(
        self,
        amount: float,
        phone_number: str,
        account_reference: str,
        transaction_desc: str,
    ) -> StkPushResult:
        seed = f"{account_reference}:{phone_number}:{amount}".encode("utf-8")
        reference = "DEMO" + hashlib.sha1(seed).hexdigest()[:10].upper()
        logger.info("Demo STK push for %s (%s): %s", phone_number, amount, reference)
        return StkPushResult(
            success=True,
            message="STK push sent successfully (demo mode)",
            reference=reference,
        )
