# routers/payments.py
"""
Payment API routes.

POST /payments/declare: tenant declares a month as paid (DECLARED receipt).
POST /payments/owner-confirm: owner records a payment directly (CONFIRMED receipt).
POST /payments/send-reminders: reminder sweep, called by a scheduler with CRON_SECRET.
"""
from fastapi import APIRouter, Depends, status

from dependencies import get_current_user, get_payment_service, verify_cron_secret
from schemas.payment import (
     OwnerConfirmRequest,
     PaymentDeclareRequest,
     ReceiptEnvelope,
     ReceiptResponse,
     ReminderResponse,
)
from services.identity import Identity
from services.payment_service import PaymentService

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post(
     "/declare",
     response_model=ReceiptEnvelope,
     status_code=status.HTTP_201_CREATED,
     summary="Declare a rent payment"
)
def declare_payment(
     body: PaymentDeclareRequest,
     identity: Identity = Depends(get_current_user),
     service: PaymentService = Depends(get_payment_service),
):
     """
     Declare the rent of one month as paid. The owner then confirms it.

     The month must lie between the lease start (or the co-tenant's arrival)
     and the current month. A month can only be declared once.
     """
     receipt = service.declare_payment(
          identity,
          lease_id=body.lease_id,
          month=body.month,
          year=body.year,
          payment_method=body.payment_method,
     )
     return ReceiptEnvelope(
          data=ReceiptResponse.model_validate(receipt),
          message="Payment declared, awaiting the owner's confirmation",
     )


@router.post(
     "/owner-confirm",
     response_model=ReceiptEnvelope,
     status_code=status.HTTP_201_CREATED,
     summary="Record and confirm a payment"
)
def owner_confirm_payment(
     body: OwnerConfirmRequest,
     identity: Identity = Depends(get_current_user),
     service: PaymentService = Depends(get_payment_service),
):
     """
     Owner bookkeeping for payments received outside the app (cash, cheque).
     Amounts default to the lease terms.
     """
     receipt = service.owner_declare_and_confirm(
          identity,
          lease_id=body.lease_id,
          month=body.month,
          year=body.year,
          rent_amount=body.rent_amount,
          charges=body.charges,
          payment_method=body.payment_method,
     )
     return ReceiptEnvelope(data=ReceiptResponse.model_validate(receipt), message="Receipt generated")


@router.post(
     "/send-reminders",
     response_model=ReminderResponse,
     summary="Send rent reminders for the current month",
     dependencies=[Depends(verify_cron_secret)],
)
def send_reminders(service: PaymentService = Depends(get_payment_service)):
     return ReminderResponse(reminders_sent=service.send_reminders())
