# services/payment_service.py
"""
Payment Service - rent receipts.

Two ways in, one Receipt row per (lease, month, year):
- tenant declares a period paid (DECLARED), the owner then confirms it
- owner records a payment directly (CONFIRMED), e.g. cash

The unique constraint on the period backs the up-front duplicate check, so
a race between two declarations ends in a ConflictError, never two rows.
"""
import calendar
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
from database import atomic
from exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from models import Lease, LeaseStatus, LeaseTenant, Property, Receipt, ReceiptStatus, User
from services.access import get_active_occupant, get_lease_or_404, require_lease_owner
from services.clock import Clock
from services.identity import Identity
from services.notification_service import NotificationDispatcher, app_link

logger = logging.getLogger(__name__)


def period_label(month: int, year: int) -> str:
     return f"{calendar.month_name[month]} {year}"


class PaymentService:
     """Service class for rent receipts."""

     def __init__(self, db: Session, dispatcher: NotificationDispatcher, clock: Clock):
          self.db = db
          self.dispatcher = dispatcher
          self.clock = clock

     # ------------------------------------------------------------------
     # Helpers
     # ------------------------------------------------------------------

     def _current_period(self) -> Tuple[int, int]:
          today = self.clock.today()
          return today.year, today.month

     def _check_month(self, month: int) -> None:
          if not 1 <= month <= 12:
               raise ValidationError("The month must be between 1 and 12")

     def _ensure_period_free(self, lease_id: int, month: int, year: int) -> None:
          existing = (
               self.db.query(Receipt.id)
               .filter(Receipt.lease_id == lease_id, Receipt.month == month, Receipt.year == year)
               .first()
          )
          if existing is not None:
               raise ConflictError(f"A receipt already exists for {period_label(month, year)}")

     def _insert_receipt(self, receipt: Receipt) -> Receipt:
          try:
               with atomic(self.db):
                    self.db.add(receipt)
          except IntegrityError:
               logger.warning(
                    "Duplicate receipt for lease %s period %s-%02d",
                    receipt.lease_id, receipt.year, receipt.month,
               )
               raise ConflictError(
                    f"A receipt already exists for {period_label(receipt.month, receipt.year)}"
               )
          return receipt

     # ------------------------------------------------------------------
     # Tenant declaration
     # ------------------------------------------------------------------

     def declare_payment(
          self,
          identity: Identity,
          lease_id: int,
          month: int,
          year: int,
          payment_method: Optional[str] = None,
     ) -> Receipt:
          """
          Tenant declares a rent period as paid.

          Eligible periods run from the lease start month (a co-tenant's join
          month for non-primary occupants) through the current month.

          Raises:
               NotFoundError: lease does not exist
               ForbiddenError: caller is not on the lease
               ConflictError: lease not active, period already has a receipt
               ValidationError: period outside the eligible window
          """
          lease = get_lease_or_404(self.db, lease_id)
          occupant = get_active_occupant(self.db, lease.id, identity.user_id)
          if lease.tenant_id != identity.user_id and occupant is None:
               raise ForbiddenError("You are not a tenant of this lease")
          if lease.status != LeaseStatus.ACTIVE:
               raise ConflictError("Payments can only be declared on an active lease")

          self._check_month(month)
          first = (lease.start_date.year, lease.start_date.month)
          if occupant is not None and not occupant.is_primary:
               first = max(first, (occupant.joined_at.year, occupant.joined_at.month))
          if not first <= (year, month) <= self._current_period():
               raise ValidationError("This month cannot be declared for this lease")

          self._ensure_period_free(lease.id, month, year)

          now = self.clock.now()
          charges = lease.charges or Decimal("0")
          receipt = self._insert_receipt(Receipt(
               lease_id=lease.id,
               month=month,
               year=year,
               rent_amount=lease.monthly_rent,
               charges=charges,
               total_amount=lease.monthly_rent + charges,
               status=ReceiptStatus.DECLARED,
               payment_method=payment_method or "transfer",
               declared_at=now,
               created_at=now,
          ))
          logger.info("Receipt %s declared by user %s for lease %s", receipt.id, identity.user_id, lease.id)

          prop = lease.property
          tenant = self.db.get(User, identity.user_id)
          owner = self.db.get(User, prop.owner_id)
          tenant_name = tenant.full_name if tenant else "Your tenant"
          label = period_label(month, year)
          self.dispatcher.notify(
               prop.owner_id,
               title="Payment declared",
               message=f"{tenant_name} declared the rent for {label} as paid ({prop.title}).",
               link="/owner/payments",
               type="PAYMENT",
          )
          self.dispatcher.email(
               owner.email if owner else None,
               subject=f"Payment declared - {label}",
               template="payment_declared",
               template_data={
                    "tenant_name": tenant_name,
                    "amount": f"{receipt.total_amount}",
                    "period": label,
                    "property_title": prop.title,
                    "link": app_link("/owner/payments"),
               },
          )
          return receipt

     # ------------------------------------------------------------------
     # Owner confirmation
     # ------------------------------------------------------------------

     def confirm_receipt(self, identity: Identity, receipt_id: int) -> Receipt:
          receipt = self.db.get(Receipt, receipt_id)
          if receipt is None:
               raise NotFoundError("Receipt not found")
          lease = receipt.lease
          require_lease_owner(lease, identity, "Only the owner can confirm a payment")
          if receipt.status != ReceiptStatus.DECLARED:
               raise ConflictError("This payment has already been confirmed")

          with atomic(self.db):
               receipt.confirm(self.clock.now())

          logger.info("Receipt %s confirmed by owner %s", receipt.id, identity.user_id)
          self._notify_receipt_available(lease, receipt)
          return receipt

     def owner_declare_and_confirm(
          self,
          identity: Identity,
          lease_id: int,
          month: int,
          year: int,
          rent_amount: Optional[Decimal] = None,
          charges: Optional[Decimal] = None,
          payment_method: Optional[str] = None,
     ) -> Receipt:
          """
          Owner records a payment in one step (cash or manual bookkeeping).

          Amounts default to the lease terms. Future periods are rejected.
          """
          lease = get_lease_or_404(self.db, lease_id)
          require_lease_owner(lease, identity, "Only the owner can record a payment")
          self._check_month(month)
          if (year, month) > self._current_period():
               raise ValidationError("A payment cannot be recorded for a future month")

          self._ensure_period_free(lease.id, month, year)

          rent = rent_amount if rent_amount is not None else lease.monthly_rent
          extra = charges if charges is not None else (lease.charges or Decimal("0"))
          now = self.clock.now()
          receipt = self._insert_receipt(Receipt(
               lease_id=lease.id,
               month=month,
               year=year,
               rent_amount=rent,
               charges=extra,
               total_amount=rent + extra,
               status=ReceiptStatus.CONFIRMED,
               payment_method=payment_method or "transfer",
               declared_at=now,
               paid_at=now,
               created_at=now,
          ))
          logger.info("Receipt %s recorded by owner %s for lease %s", receipt.id, identity.user_id, lease.id)
          self._notify_receipt_available(lease, receipt)
          return receipt

     def _notify_receipt_available(self, lease: Lease, receipt: Receipt) -> None:
          prop = lease.property
          label = period_label(receipt.month, receipt.year)
          self.dispatcher.notify(
               lease.tenant_id,
               title="Receipt available",
               message=f"Your rent receipt for {label} ({prop.title}) is available.",
               link="/tenant/receipts",
               type="PAYMENT",
          )
          tenant = self.db.get(User, lease.tenant_id)
          self.dispatcher.email(
               tenant.email if tenant else None,
               subject=f"Rent receipt - {label}",
               template="receipt_generated",
               template_data={
                    "period": label,
                    "amount": f"{receipt.total_amount}",
                    "property_title": prop.title,
                    "link": app_link("/tenant/receipts"),
               },
          )

     # ------------------------------------------------------------------
     # Reads
     # ------------------------------------------------------------------

     def list_receipts(
          self,
          identity: Identity,
          role: str = "tenant",
          lease_id: Optional[int] = None,
          status: Optional[ReceiptStatus] = None,
     ) -> List[Receipt]:
          """
          Role-scoped receipts, newest period first.

          A non-primary occupant never sees periods before their join month.
          """
          query = self.db.query(Receipt).join(Lease, Receipt.lease_id == Lease.id)

          if role == "owner":
               query = query.join(Property, Lease.property_id == Property.id).filter(
                    Property.owner_id == identity.user_id
               )
          else:
               memberships = (
                    self.db.query(LeaseTenant)
                    .filter(
                         LeaseTenant.tenant_id == identity.user_id,
                         LeaseTenant.left_at.is_(None),
                    )
                    .all()
               )
               visible = [Lease.tenant_id == identity.user_id]
               for membership in memberships:
                    if membership.is_primary:
                         visible.append(Receipt.lease_id == membership.lease_id)
                         continue
                    joined = membership.joined_at
                    visible.append(and_(
                         Receipt.lease_id == membership.lease_id,
                         or_(
                              Receipt.year > joined.year,
                              and_(Receipt.year == joined.year, Receipt.month >= joined.month),
                         ),
                    ))
               query = query.filter(or_(*visible))

          if lease_id is not None:
               query = query.filter(Receipt.lease_id == lease_id)
          if status is not None:
               query = query.filter(Receipt.status == status)

          return query.order_by(Receipt.year.desc(), Receipt.month.desc(), Receipt.id.desc()).all()

     # ------------------------------------------------------------------
     # Reminders
     # ------------------------------------------------------------------

     def send_reminders(self) -> int:
          """
          Email the primary tenant of every ACTIVE lease with no receipt for
          the current month, once the reminder day has passed.

          Returns:
               Number of reminders handed off to the email sink
          """
          today = self.clock.today()
          if today.day < config.REMINDER_DAY_OF_MONTH:
               return 0

          paid = select(Receipt.lease_id).where(
               Receipt.month == today.month,
               Receipt.year == today.year,
          )
          leases = (
               self.db.query(Lease)
               .filter(Lease.status == LeaseStatus.ACTIVE, Lease.id.notin_(paid))
               .order_by(Lease.id)
               .all()
          )

          label = period_label(today.month, today.year)
          sent = 0
          for lease in leases:
               result = self.dispatcher.email(
                    lease.tenant.email,
                    subject=f"Rent reminder - {lease.property.title}",
                    template="payment_reminder",
                    template_data={
                         "period": label,
                         "property_title": lease.property.title,
                         "amount": f"{lease.total_monthly_amount}",
                         "link": app_link("/tenant/payments"),
                    },
               )
               if result.ok:
                    sent += 1
          logger.info("Payment reminders sent: %d of %d leases", sent, len(leases))
          return sent
