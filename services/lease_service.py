# services/lease_service.py
"""
Lease Service - issues leases from accepted applications.

A lease whose start date is before today is retroactive: it starts ACTIVE
and its past rent periods are backfilled as CONFIRMED receipts, all in the
same transaction as the lease, its primary occupant row and the property
flag flip.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import insert, or_, select
from sqlalchemy.orm import Session

import config
from database import atomic
from exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from models import (
     Application,
     ApplicationStatus,
     InventoryType,
     Lease,
     LeaseStatus,
     LeaseTenant,
     Property,
     Receipt,
     ReceiptStatus,
     User,
)
from services.access import get_lease_or_404, is_lease_member, require_lease_owner
from services.clock import Clock
from services.identity import Identity
from services.notification_service import NotificationDispatcher, app_link

logger = logging.getLogger(__name__)


@dataclass
class LeaseIssuance:
     lease: Lease
     receipts_generated: int
     is_retroactive: bool


def months_between(start: date, end: date) -> List[Tuple[int, int]]:
     """
     Every (year, month) from start's month through end's month inclusive.

     Returns an empty list when end is before start's month.
     """
     months = []
     year, month = start.year, start.month
     while (year, month) <= (end.year, end.month):
          months.append((year, month))
          month += 1
          if month > 12:
               month = 1
               year += 1
     return months


def build_backfill_rows(lease: Lease, periods: List[Tuple[int, int]]) -> List[dict]:
     """Materialize one CONFIRMED receipt row per period, paid on the 5th."""
     charges = lease.charges or Decimal("0")
     total = lease.monthly_rent + charges
     rows = []
     for year, month in periods:
          paid_on = datetime(year, month, config.BACKFILL_PAYMENT_DAY)
          rows.append({
               "lease_id": lease.id,
               "month": month,
               "year": year,
               "rent_amount": lease.monthly_rent,
               "charges": charges,
               "total_amount": total,
               "status": ReceiptStatus.CONFIRMED,
               "payment_method": "transfer",
               "declared_at": paid_on,
               "paid_at": paid_on,
               "created_at": paid_on,
          })
     return rows


class LeaseService:
     """Service class for lease issuance and lifecycle."""

     def __init__(self, db: Session, dispatcher: NotificationDispatcher, clock: Clock):
          self.db = db
          self.dispatcher = dispatcher
          self.clock = clock

     def create_lease(
          self,
          identity: Identity,
          application_id: int,
          start_date: date,
          rent_amount: Decimal,
          end_date: Optional[date] = None,
          deposit_amount: Optional[Decimal] = None,
          charges: Optional[Decimal] = None,
     ) -> LeaseIssuance:
          """
          Issue a lease from an ACCEPTED application.

          Raises:
               NotFoundError: application does not exist
               ForbiddenError: caller does not own the property
               ConflictError: application not accepted, or a non-ENDED lease
                    already binds this property and tenant
               ValidationError: end date not after start date
          """
          application = self.db.get(Application, application_id)
          if application is None:
               raise NotFoundError("Application not found")

          prop = application.property
          if not prop.is_owned_by(identity.user_id):
               raise ForbiddenError("Not authorized")
          if application.status != ApplicationStatus.ACCEPTED:
               raise ConflictError("The application must be accepted before creating a lease")
          if end_date is not None and end_date <= start_date:
               raise ValidationError("The end date must be after the start date")

          existing = (
               self.db.query(Lease)
               .filter(
                    Lease.property_id == application.property_id,
                    Lease.tenant_id == application.tenant_id,
                    Lease.status != LeaseStatus.ENDED,
               )
               .first()
          )
          if existing is not None:
               raise ConflictError("A lease already exists for this tenant and property")

          now = self.clock.now()
          today = self.clock.today()
          is_retroactive = start_date < today

          with atomic(self.db):
               lease = Lease(
                    property_id=application.property_id,
                    tenant_id=application.tenant_id,
                    application_id=application.id,
                    start_date=start_date,
                    end_date=end_date,
                    monthly_rent=rent_amount,
                    deposit=deposit_amount if deposit_amount is not None else rent_amount,
                    charges=charges or Decimal("0"),
                    status=LeaseStatus.ACTIVE if is_retroactive else LeaseStatus.PENDING,
                    created_at=now,
               )
               self.db.add(lease)
               self.db.flush()

               self.db.add(LeaseTenant(
                    lease_id=lease.id,
                    tenant_id=application.tenant_id,
                    is_primary=True,
                    share=100,
                    joined_at=datetime.combine(start_date, datetime.min.time()),
               ))

               prop.mark_leased(application.tenant_id)

               receipts_generated = 0
               if is_retroactive:
                    rows = build_backfill_rows(lease, months_between(start_date, today))
                    if rows:
                         self.db.execute(insert(Receipt), rows)
                    receipts_generated = len(rows)

          logger.info(
               "Lease %s issued for property %s (retroactive=%s, receipts=%d)",
               lease.id, prop.id, is_retroactive, receipts_generated,
          )
          self._notify_lease_created(lease, prop, receipts_generated, is_retroactive)
          return LeaseIssuance(
               lease=lease,
               receipts_generated=receipts_generated,
               is_retroactive=is_retroactive,
          )

     def _notify_lease_created(self, lease: Lease, prop: Property, receipts_generated: int, is_retroactive: bool) -> None:
          tenant = self.db.get(User, lease.tenant_id)
          owner = self.db.get(User, prop.owner_id)
          template_data = {
               "property_title": prop.title,
               "start_date": lease.start_date.isoformat(),
               "monthly_rent": f"{lease.monthly_rent}",
          }

          self.dispatcher.notify(
               lease.tenant_id,
               title="Lease created",
               message=f"Your lease for \"{prop.title}\" has been created.",
               link=f"/tenant/leases/{lease.id}",
          )
          self.dispatcher.email(
               tenant.email if tenant else None,
               subject=f"Your lease - {prop.title}",
               template="lease_signed",
               template_data={**template_data, "link": app_link(f"/tenant/leases/{lease.id}")},
          )
          self.dispatcher.notify(
               prop.owner_id,
               title="Lease created",
               message=f"The lease for \"{prop.title}\" has been created.",
               link=f"/owner/leases/{lease.id}",
          )
          self.dispatcher.email(
               owner.email if owner else None,
               subject=f"Lease created - {prop.title}",
               template="lease_signed",
               template_data={**template_data, "link": app_link(f"/owner/leases/{lease.id}")},
          )

          if is_retroactive:
               self.dispatcher.notify(
                    lease.tenant_id,
                    title="Welcome home",
                    message=(
                         f"Your {receipts_generated} receipts are ready. "
                         f"Configure your services for \"{prop.title}\"."
                    ),
                    link="/tenant/services",
               )
               self.dispatcher.email(
                    tenant.email if tenant else None,
                    subject=f"Welcome - your {receipts_generated} receipts are ready",
                    template="welcome_retroactive",
                    template_data={
                         "property_title": prop.title,
                         "receipts_generated": receipts_generated,
                         "link": app_link("/tenant/receipts"),
                    },
               )

     # ------------------------------------------------------------------
     # Lifecycle
     # ------------------------------------------------------------------

     def record_inventory(self, identity: Identity, lease_id: int, kind: InventoryType) -> Lease:
          """Owner confirms the move-in (PENDING lease) or move-out (ACTIVE lease) inventory."""
          lease = get_lease_or_404(self.db, lease_id)
          require_lease_owner(lease, identity, "Only the owner can confirm an inventory")

          if kind == InventoryType.IN and lease.status != LeaseStatus.PENDING:
               raise ConflictError("The lease must be pending for the move-in inventory")
          if kind == InventoryType.OUT and lease.status != LeaseStatus.ACTIVE:
               raise ConflictError("The lease must be active for the move-out inventory")

          with atomic(self.db):
               lease.record_inventory(kind, self.clock.now(), identity.user_id)
          logger.info("Inventory %s recorded on lease %s", kind.value, lease.id)
          return lease

     def activate_lease(self, identity: Identity, lease_id: int) -> Lease:
          lease = get_lease_or_404(self.db, lease_id)
          require_lease_owner(lease, identity)

          allowed, reason = lease.can_activate()
          if not allowed:
               raise ConflictError(reason)

          with atomic(self.db):
               lease.activate()

          logger.info("Lease %s activated", lease.id)
          self.dispatcher.notify(
               lease.tenant_id,
               title="Lease active",
               message=f"Your lease for \"{lease.property.title}\" is now active.",
               link=f"/tenant/leases/{lease.id}",
          )
          return lease

     def end_lease(self, identity: Identity, lease_id: int) -> Lease:
          lease = get_lease_or_404(self.db, lease_id)
          require_lease_owner(lease, identity)

          allowed, reason = lease.can_end()
          if not allowed:
               raise ConflictError(reason)

          with atomic(self.db):
               lease.end(self.clock.today())
               lease.property.mark_vacant()

          logger.info("Lease %s ended, property %s available again", lease.id, lease.property_id)
          self.dispatcher.notify(
               lease.tenant_id,
               title="Lease ended",
               message=f"Your lease for \"{lease.property.title}\" has ended.",
               link=f"/tenant/leases/{lease.id}",
          )
          return lease

     # ------------------------------------------------------------------
     # Reads
     # ------------------------------------------------------------------

     def list_leases(self, identity: Identity, role: str = "tenant") -> List[Lease]:
          query = self.db.query(Lease)
          if role == "owner":
               query = query.join(Property, Lease.property_id == Property.id).filter(
                    Property.owner_id == identity.user_id
               )
          else:
               occupied = select(LeaseTenant.lease_id).where(
                    LeaseTenant.tenant_id == identity.user_id,
                    LeaseTenant.left_at.is_(None),
               )
               query = query.filter(
                    or_(Lease.tenant_id == identity.user_id, Lease.id.in_(occupied))
               )
          return query.order_by(Lease.created_at.desc(), Lease.id.desc()).all()

     def get_lease(self, identity: Identity, lease_id: int) -> Lease:
          lease = get_lease_or_404(self.db, lease_id)
          if not lease.property.is_owned_by(identity.user_id) and not is_lease_member(self.db, lease, identity):
               raise ForbiddenError("You do not have access to this lease")
          return lease
