# models/lease_tenant.py
import enum
from datetime import datetime

from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base


class OccupancyState(str, enum.Enum):
     """Membership state of an occupant; DEPARTED rows carry left_at."""
     ACTIVE = "ACTIVE"
     DEPARTED = "DEPARTED"


class LeaseTenant(Base):
     """
     Occupant of a lease (colocation).

     Rows are never deleted: departure sets left_at so past receipts can
     still be attributed to the share period they belong to.
     """
     __table_args__ = (
          CheckConstraint("share >= 0 AND share <= 100", name="ck_lease_tenants_share_range"),
     )

     lease_id = Column(Integer, ForeignKey("leases.id", ondelete="CASCADE"), primary_key=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
     is_primary = Column(Boolean, default=False, nullable=False)
     share = Column(Integer, default=100, nullable=False)  # percent of the rent
     joined_at = Column(DateTime, nullable=False)
     left_at = Column(DateTime, nullable=True)

     # Relationships
     lease = relationship("Lease", back_populates="occupants")
     tenant = relationship("User")

     def __repr__(self):
          return f"<LeaseTenant(lease_id={self.lease_id}, tenant_id={self.tenant_id}, share={self.share}, primary={self.is_primary})>"

     @property
     def state(self) -> OccupancyState:
          return OccupancyState.ACTIVE if self.left_at is None else OccupancyState.DEPARTED

     @property
     def is_active(self) -> bool:
          return self.state == OccupancyState.ACTIVE

     def depart(self, at: datetime) -> None:
          self.left_at = at
          self.is_primary = False

     def rejoin(self, at: datetime, share: int) -> None:
          self.left_at = None
          self.joined_at = at
          self.share = share
          self.is_primary = False

     def can_see_period(self, year: int, month: int) -> bool:
          """True when the (year, month) period is on or after the join month."""
          return (year, month) >= (self.joined_at.year, self.joined_at.month)
