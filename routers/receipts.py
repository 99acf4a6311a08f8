# routers/receipts.py
"""
Receipt API routes.

Role-based access:
- Tenant: receipts of leases they occupy (co-tenants only from their arrival month)
- Owner: receipts of leases on owned properties; confirms declared payments
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from dependencies import get_current_user, get_payment_service
from models import ReceiptStatus
from schemas.payment import ReceiptEnvelope, ReceiptListResponse, ReceiptResponse
from services.identity import Identity
from services.payment_service import PaymentService

router = APIRouter(prefix="/api/receipts", tags=["receipts"])


@router.get(
     "",
     response_model=ReceiptListResponse,
     summary="List receipts"
)
def list_receipts(
     role: str = Query("tenant", pattern="^(owner|tenant)$"),
     lease_id: Optional[int] = Query(None, alias="leaseId", description="Filter by lease ID"),
     status: Optional[ReceiptStatus] = Query(None, description="Filter by status"),
     identity: Identity = Depends(get_current_user),
     service: PaymentService = Depends(get_payment_service),
):
     receipts = service.list_receipts(identity, role=role, lease_id=lease_id, status=status)
     return ReceiptListResponse(data=[ReceiptResponse.model_validate(r) for r in receipts])


@router.patch(
     "/{receipt_id}/confirm",
     response_model=ReceiptEnvelope,
     summary="Confirm a declared payment"
)
def confirm_receipt(
     receipt_id: int,
     identity: Identity = Depends(get_current_user),
     service: PaymentService = Depends(get_payment_service),
):
     receipt = service.confirm_receipt(identity, receipt_id)
     return ReceiptEnvelope(data=ReceiptResponse.model_validate(receipt), message="Payment confirmed")
