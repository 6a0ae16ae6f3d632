from abc import ABC, abstractmethod
from typing import Any, Optional


class StkPushResult:
    def __init__(
        self,
        success: bool,
        message: str,
        reference: Optional[str] = None,
        error: Any = None,
    ):
        self.success = success
        self.message = message
        self.reference = reference
        self.error = error

    def __repr__(self):
        return (
            f"StkPushResult(success={self.success!r}, message={self.message!r}, "
            f"reference={self.reference!r}, error={self.error!r})"
        )


class BaseProvider(ABC):
    """Abstract base for push-payment providers."""

    @abstractmethod
    async def stk_push(
        self,
        amount: float,
        phone_number: str,
        account_reference: str,
        transaction_desc: str,
    ) -> StkPushResult:
        """
        Prompt the payer's phone to approve a charge.

        phone_number must already be canonical and account_reference unique
        per call. Failures are returned as StkPushResult(success=False, ...),
        never raised.
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @property
    def demo_mode(self) -> bool:
        return False

    async def aclose(self) -> None:
        """Release any network resources held by the provider."""
        return None
