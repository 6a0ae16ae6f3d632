from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InitiatePaymentRequest(BaseModel):
    # phone and amount are checked by the payment pipeline so that failures
    # come back as 400 with a field-specific message
    phone: Any = None
    amount: Any = None
    type: Any = None
    offer_name: Any = Field(default=None, alias="offerName")
    recipient_phone: Any = Field(default=None, alias="recipientPhone")
    points: Any = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("type", "offer_name")
    @classmethod
    def free_form_text(cls, v) -> Optional[str]:
        if v is None:
            return None
        return str(v)

    @field_validator("points")
    @classmethod
    def optional_points(cls, v) -> Optional[int]:
        """Points are informational; anything that is not a whole number is dropped."""
        if v is None or isinstance(v, bool):
            return None
        try:
            return int(str(v).strip())
        except ValueError:
            return None
