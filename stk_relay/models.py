import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String

from stk_relay.database import Base


class TransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    FAILED = "FAILED"
    # Set later by settlement, never by this service
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


def utcnow():
    return datetime.now(timezone.utc)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    payer_phone = Column(String(12), nullable=False, index=True)
    recipient_phone = Column(String(12), nullable=False)
    amount = Column(Float, nullable=False)
    type = Column(String, nullable=True)
    offer_name = Column(String, nullable=True)
    points = Column(Integer, nullable=True)
    status = Column(String, nullable=False, default=TransactionStatus.PENDING.value)
    account_ref = Column(String, nullable=False, unique=True, index=True)
    checkout_request_id = Column(String, nullable=True)
    merchant_request_id = Column(String, nullable=True)
    response_code = Column(String, nullable=True)
    response_description = Column(String, nullable=True)
    customer_message = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)
