# services/access.py
"""Lease lookup and role checks shared by the lease, colocation and payment services."""
from typing import Optional

from sqlalchemy.orm import Session

from exceptions import ForbiddenError, NotFoundError
from models import Lease, LeaseTenant
from services.identity import Identity


def get_lease_or_404(db: Session, lease_id: int, for_update: bool = False) -> Lease:
     query = db.query(Lease).filter(Lease.id == lease_id)
     if for_update:
          query = query.with_for_update()  # Row-level lock (no-op on SQLite)
     lease = query.first()
     if lease is None:
          raise NotFoundError("Lease not found")
     return lease


def is_lease_owner(lease: Lease, identity: Identity) -> bool:
     return lease.property.is_owned_by(identity.user_id)


def require_lease_owner(lease: Lease, identity: Identity, message: str = "Not authorized") -> None:
     if not is_lease_owner(lease, identity):
          raise ForbiddenError(message)


def get_active_occupant(db: Session, lease_id: int, tenant_id: int) -> Optional[LeaseTenant]:
     return (
          db.query(LeaseTenant)
          .filter(
               LeaseTenant.lease_id == lease_id,
               LeaseTenant.tenant_id == tenant_id,
               LeaseTenant.left_at.is_(None),
          )
          .first()
     )


def is_lease_member(db: Session, lease: Lease, identity: Identity) -> bool:
     """Primary tenant of record or a currently active occupant."""
     if lease.tenant_id == identity.user_id:
          return True
     return get_active_occupant(db, lease.id, identity.user_id) is not None
