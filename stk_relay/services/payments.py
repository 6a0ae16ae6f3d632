"""
Payment initiation pipeline.

Orchestrates:
1. Validate and normalize payer/recipient phones and the amount
2. Generate a unique account reference
3. Persist a PENDING transaction row
4. Send the STK push through the provider
5. Write the provider outcome back to the row (best effort)
6. Return the outcome for the HTTP layer
"""
import logging
import math
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from stk_relay import models
from stk_relay.errors import PersistenceError, ReconciliationWriteError, ValidationError
from stk_relay.providers.base import BaseProvider, StkPushResult
from stk_relay.schemas.requests import InitiatePaymentRequest
from stk_relay.services.phone import format_phone_number, is_valid_phone_number

logger = logging.getLogger(__name__)

ACCOUNT_REF_PREFIX = "TXN"
ACCOUNT_REF_SUFFIX_LENGTH = 8
_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits

INVALID_PHONE_MESSAGE = "Invalid phone number format. Please use a valid Kenyan mobile number."
INVALID_RECIPIENT_MESSAGE = "Invalid recipient phone number format."
INVALID_AMOUNT_MESSAGE = "Invalid amount. Amount must be greater than 0."


class PaymentOutcome:
    def __init__(
        self,
        success: bool,
        message: str,
        account_ref: str,
        reference: Optional[str] = None,
        customer_message: Optional[str] = None,
        error: Any = None,
    ):
        self.success = success
        self.message = message
        self.account_ref = account_ref
        self.reference = reference
        self.customer_message = customer_message
        self.error = error


def generate_account_ref() -> str:
    """TXN + epoch milliseconds + random upper-case alphanumeric suffix."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(ACCOUNT_REF_SUFFIX_LENGTH))
    return f"{ACCOUNT_REF_PREFIX}{int(time.time() * 1000)}{suffix}"


def parse_amount(value) -> float:
    """
    Raises:
        ValidationError: if value is not a finite number greater than zero
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("amount", INVALID_AMOUNT_MESSAGE)
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError("amount", INVALID_AMOUNT_MESSAGE)
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("amount", INVALID_AMOUNT_MESSAGE)
    return amount


def validate_request(payload: InitiatePaymentRequest) -> Tuple[str, str, float]:
    """
    Returns (payer_phone, recipient_phone, amount), all normalized.

    Raises:
        ValidationError: naming the first field that failed
    """
    payer_phone = format_phone_number(payload.phone)
    if not is_valid_phone_number(payer_phone):
        raise ValidationError("phone", INVALID_PHONE_MESSAGE)

    recipient_phone = payer_phone
    if payload.recipient_phone:
        recipient_phone = format_phone_number(payload.recipient_phone)
        if not is_valid_phone_number(recipient_phone):
            raise ValidationError("recipientPhone", INVALID_RECIPIENT_MESSAGE)

    amount = parse_amount(payload.amount)
    return payer_phone, recipient_phone, amount


def _insert_pending(
    db: Session,
    payload: InitiatePaymentRequest,
    payer_phone: str,
    recipient_phone: str,
    amount: float,
    account_ref: str,
) -> models.Transaction:
    txn = models.Transaction(
        payer_phone=payer_phone,
        recipient_phone=recipient_phone,
        amount=amount,
        type=payload.type,
        offer_name=payload.offer_name,
        points=payload.points,
        status=models.TransactionStatus.PENDING.value,
        account_ref=account_ref,
        customer_message=f"Payment for {payload.offer_name}",
    )
    try:
        db.add(txn)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database error while inserting %s: %s", account_ref, e)
        raise PersistenceError(f"Could not record transaction {account_ref}") from e
    return txn


def _reconcile(db: Session, account_ref: str, result: StkPushResult) -> None:
    """
    Attach the provider outcome to the stored row.

    Raises:
        ReconciliationWriteError: if the update fails
    """
    values = {
        "response_code": "0" if result.success else "1",
        "response_description": result.message or "Unknown response",
        "updated_at": datetime.now(timezone.utc),
    }
    if result.success:
        # Settlement is asynchronous; status stays PENDING
        values["checkout_request_id"] = result.reference or account_ref
        values["merchant_request_id"] = result.reference or account_ref
    else:
        values["status"] = models.TransactionStatus.FAILED.value

    try:
        db.query(models.Transaction).filter(
            models.Transaction.account_ref == account_ref
        ).update(values, synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise ReconciliationWriteError(f"Could not update transaction {account_ref}: {e}") from e


async def initiate_payment(
    payload: InitiatePaymentRequest,
    db: Session,
    provider: BaseProvider,
) -> PaymentOutcome:
    """
    Run one payment request through the pipeline.

    Raises:
        ValidationError: bad phone, recipient phone or amount; nothing persisted
        PersistenceError: the pending row could not be stored; provider not called
    """
    payer_phone, recipient_phone, amount = validate_request(payload)

    account_ref = generate_account_ref()
    # Session calls block; keep them off the event loop
    await run_in_threadpool(
        _insert_pending, db, payload, payer_phone, recipient_phone, amount, account_ref
    )

    result = await provider.stk_push(
        amount=amount,
        phone_number=payer_phone,
        account_reference=account_ref,
        transaction_desc=f"Payment for {payload.offer_name}",
    )
    logger.info("%s response for %s: %r", provider.provider_name, account_ref, result)

    # The stored row may disagree with the provider until settlement if this fails
    try:
        await run_in_threadpool(_reconcile, db, account_ref, result)
    except ReconciliationWriteError as e:
        logger.error("%s", e)

    if not result.success:
        return PaymentOutcome(
            success=False,
            message=result.message or "Failed to initiate payment",
            account_ref=account_ref,
            error=result.error,
        )

    return PaymentOutcome(
        success=True,
        message=result.message,
        account_ref=account_ref,
        reference=result.reference or account_ref,
        customer_message=(
            f"Payment request sent to {payer_phone}. "
            "Please complete the payment on your phone."
        ),
    )
