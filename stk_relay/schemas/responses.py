from typing import Any, Optional

from pydantic import BaseModel


class InitiatePaymentResponse(BaseModel):
    success: bool = True
    message: str
    reference: str
    CustomerMessage: str
    AccountReference: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[Any] = None


class CallbackAck(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
