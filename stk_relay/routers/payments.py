import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from stk_relay.database import get_db
from stk_relay.errors import PersistenceError, ValidationError
from stk_relay.providers.base import BaseProvider
from stk_relay.providers.factory import get_provider
from stk_relay.schemas.requests import InitiatePaymentRequest
from stk_relay.schemas.responses import ErrorResponse, InitiatePaymentResponse
from stk_relay.services.payments import initiate_payment

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, message: str, error=None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "/initiate-payment",
    response_model=InitiatePaymentResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@router.post("/stk-push", response_model=InitiatePaymentResponse, include_in_schema=False)
async def initiate(
    payload: InitiatePaymentRequest,
    db: Session = Depends(get_db),
    provider: BaseProvider = Depends(get_provider),
):
    """
    Charge a phone number through an STK push.

    - Validates payer/recipient phones and the amount (400 on failure)
    - Records a PENDING transaction (500 if the store fails; provider not called)
    - Sends the push and stores the provider's outcome
    - 200 on provider success, 400 with the provider's message on failure
    """
    try:
        outcome = await initiate_payment(payload, db, provider)
    except ValidationError as e:
        return _error(400, e.message)
    except PersistenceError:
        return _error(500, "Failed to process request")
    except Exception:
        logger.exception("STK push error")
        return _error(500, "Internal server error")

    if not outcome.success:
        return _error(400, outcome.message, outcome.error)

    return InitiatePaymentResponse(
        message=outcome.message,
        reference=outcome.reference,
        CustomerMessage=outcome.customer_message,
        AccountReference=outcome.account_ref,
    )
