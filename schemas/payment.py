# schemas/payment.py
"""
Pydantic schemas for payment declaration and receipt API.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import ConfigDict, Field

from models import ReceiptStatus
from .common import CamelModel


class PaymentDeclareRequest(CamelModel):
     """Request body for POST /payments/declare."""

     lease_id: int = Field(..., gt=0, description="Lease the rent belongs to")
     month: int = Field(..., ge=1, le=12)
     year: int = Field(..., ge=2000, le=2100)
     payment_method: Optional[str] = Field(None, max_length=50, description="transfer, cash, cheque...")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "leaseId": 1,
                    "month": 6,
                    "year": 2026,
                    "paymentMethod": "transfer",
               }
          }
     )


class OwnerConfirmRequest(CamelModel):
     """Request body for POST /payments/owner-confirm. Amounts default to the lease terms."""

     lease_id: int = Field(..., gt=0)
     month: int = Field(..., ge=1, le=12)
     year: int = Field(..., ge=2000, le=2100)
     rent_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     charges: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     payment_method: Optional[str] = Field(None, max_length=50)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "leaseId": 1,
                    "month": 5,
                    "year": 2026,
                    "rentAmount": 1000.00,
                    "charges": 50.00,
                    "paymentMethod": "cash",
               }
          }
     )


class ReceiptResponse(CamelModel):
     id: int
     lease_id: int
     month: int
     year: int
     rent_amount: Decimal
     charges: Decimal
     total_amount: Decimal
     status: ReceiptStatus
     payment_method: str
     declared_at: Optional[datetime] = None
     paid_at: Optional[datetime] = None
     created_at: datetime


class ReceiptEnvelope(CamelModel):
     data: ReceiptResponse
     message: Optional[str] = None


class ReceiptListResponse(CamelModel):
     data: List[ReceiptResponse]


class ReminderResponse(CamelModel):
     reminders_sent: int
