# services/colocation_service.py
"""
Colocation Service - the occupants of a lease and their rent shares.

Occupant rows are soft-deleted (left_at) and never removed, so the join
month of every co-tenant stays available for receipt visibility.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

import config
from database import atomic
from exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from models import Lease, LeaseStatus, LeaseTenant, User
from services.access import get_lease_or_404, is_lease_owner, require_lease_owner
from services.clock import Clock
from services.identity import Identity
from services.notification_service import NotificationDispatcher

logger = logging.getLogger(__name__)


@dataclass
class OccupantRoster:
     occupants: List[LeaseTenant]
     total_share: int

     @property
     def share_warning(self) -> bool:
          return self.total_share != 100


def equal_shares(count: int) -> tuple:
     """(base share, remainder) splitting 100 between `count` occupants."""
     base = 100 // count
     return base, 100 - base * count


class ColocationService:
     """Service class for lease occupants (colocation)."""

     def __init__(self, db: Session, dispatcher: NotificationDispatcher, clock: Clock):
          self.db = db
          self.dispatcher = dispatcher
          self.clock = clock

     def _active_occupants(self, lease_id: int) -> List[LeaseTenant]:
          """Active rows, primary first then by join time."""
          return (
               self.db.query(LeaseTenant)
               .filter(LeaseTenant.lease_id == lease_id, LeaseTenant.left_at.is_(None))
               .order_by(
                    LeaseTenant.is_primary.desc(),
                    LeaseTenant.joined_at.asc(),
                    LeaseTenant.tenant_id.asc(),
               )
               .all()
          )

     def _find_active(self, occupants: List[LeaseTenant], tenant_id: int) -> LeaseTenant:
          for occupant in occupants:
               if occupant.tenant_id == tenant_id:
                    return occupant
          raise NotFoundError("Occupant not found on this lease")

     # ------------------------------------------------------------------
     # Reads
     # ------------------------------------------------------------------

     def list_occupants(self, identity: Identity, lease_id: int) -> OccupantRoster:
          lease = get_lease_or_404(self.db, lease_id)
          occupants = self._active_occupants(lease.id)
          if not is_lease_owner(lease, identity) and identity.user_id not in {o.tenant_id for o in occupants}:
               raise ForbiddenError("You do not have access to this lease")
          return OccupantRoster(
               occupants=occupants,
               total_share=sum(o.share for o in occupants),
          )

     # ------------------------------------------------------------------
     # Mutations
     # ------------------------------------------------------------------

     def add_occupant(
          self,
          identity: Identity,
          lease_id: int,
          email: str,
          share: int = config.DEFAULT_COTENANT_SHARE,
          rebalance: bool = True,
     ) -> LeaseTenant:
          """
          Add a co-tenant to an ACTIVE lease.

          With rebalance, every active occupant ends up with floor(100/N) and
          the primary takes the remainder, in the same transaction as the
          insert.

          Raises:
               ForbiddenError: caller does not own the property
               ConflictError: lease not active, lease full, already an occupant
               NotFoundError: no account with this email
          """
          lease = get_lease_or_404(self.db, lease_id, for_update=True)
          require_lease_owner(lease, identity, "Only the owner can add an occupant")
          if lease.status != LeaseStatus.ACTIVE:
               raise ConflictError("The lease must be active to add an occupant")

          occupants = self._active_occupants(lease.id)
          if len(occupants) >= config.MAX_OCCUPANTS_PER_LEASE:
               raise ConflictError(
                    f"A lease can have at most {config.MAX_OCCUPANTS_PER_LEASE} occupants"
               )

          normalized = email.strip().lower()
          user = self.db.query(User).filter(User.email == normalized).first()
          if user is None:
               raise NotFoundError(
                    "No account found with this email. The person must create an account first."
               )
          if any(o.tenant_id == user.id for o in occupants):
               raise ConflictError("This person is already an occupant of this lease")

          now = self.clock.now()
          with atomic(self.db):
               departed = self.db.get(LeaseTenant, (lease.id, user.id))
               if departed is not None:
                    departed.rejoin(now, share)
                    occupant = departed
               else:
                    occupant = LeaseTenant(
                         lease_id=lease.id,
                         tenant_id=user.id,
                         is_primary=False,
                         share=share,
                         joined_at=now,
                    )
                    self.db.add(occupant)

               if not user.is_tenant:
                    user.is_tenant = True

               if rebalance:
                    self._rebalance(occupants + [occupant])

          logger.info("User %s joined lease %s (share=%s)", user.id, lease.id, occupant.share)
          self.dispatcher.notify(
               user.id,
               title="Added to a lease",
               message=f"You were added as an occupant of \"{lease.property.title}\".",
               link=f"/tenant/leases/{lease.id}",
          )
          return occupant

     def _rebalance(self, occupants: List[LeaseTenant]) -> None:
          """
          Split 100 equally between `occupants`.

          Each gets floor(100 / N); the primary also takes the remainder so the
          total stays at 100 (three occupants: 34/33/33).
          """
          base, remainder = equal_shares(len(occupants))
          for occupant in occupants:
               occupant.share = base + remainder if occupant.is_primary else base

     def update_occupant(
          self,
          identity: Identity,
          lease_id: int,
          tenant_id: int,
          share: Optional[int] = None,
          is_primary: Optional[bool] = None,
     ) -> LeaseTenant:
          """Change a share and/or move the primary flag. The share total is not enforced."""
          lease = get_lease_or_404(self.db, lease_id, for_update=True)
          require_lease_owner(lease, identity, "Only the owner can update an occupant")
          if share is not None and not 0 <= share <= 100:
               raise ValidationError("The share must be between 0 and 100")

          occupants = self._active_occupants(lease.id)
          target = self._find_active(occupants, tenant_id)
          if is_primary is False and target.is_primary:
               raise ConflictError("A lease must keep a primary occupant. Promote another occupant instead.")

          with atomic(self.db):
               if is_primary:
                    for occupant in occupants:
                         if occupant is not target and occupant.is_primary:
                              occupant.is_primary = False
                    target.is_primary = True
                    self._repoint_primary(lease, target.tenant_id)
               if share is not None:
                    target.share = share

          logger.info("Occupant %s of lease %s updated", tenant_id, lease.id)
          return target

     def remove_occupant(self, identity: Identity, lease_id: int, tenant_id: int) -> LeaseTenant:
          """Soft-delete an occupant; the earliest-joined remaining one inherits the primary flag."""
          lease = get_lease_or_404(self.db, lease_id, for_update=True)
          require_lease_owner(lease, identity, "Only the owner can remove an occupant")

          occupants = self._active_occupants(lease.id)
          if len(occupants) < 2:
               raise ConflictError("Cannot remove the last occupant. End the lease instead.")
          target = self._find_active(occupants, tenant_id)

          with atomic(self.db):
               was_primary = target.is_primary
               target.depart(self.clock.now())
               if was_primary:
                    remaining = sorted(
                         (o for o in occupants if o is not target),
                         key=lambda o: (o.joined_at, o.tenant_id),
                    )
                    successor = remaining[0]
                    successor.is_primary = True
                    self._repoint_primary(lease, successor.tenant_id)
                    logger.info("Occupant %s promoted to primary on lease %s", successor.tenant_id, lease.id)

          logger.info("Occupant %s left lease %s", tenant_id, lease.id)
          self.dispatcher.notify(
               tenant_id,
               title="Removed from a lease",
               message=f"You are no longer an occupant of \"{lease.property.title}\".",
               link="/tenant/leases",
          )
          return target

     def _repoint_primary(self, lease: Lease, tenant_id: int) -> None:
          lease.tenant_id = tenant_id
          if lease.status != LeaseStatus.ENDED and lease.property.occupant_id is not None:
               lease.property.occupant_id = tenant_id
