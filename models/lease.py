# models/lease.py
import enum
from datetime import date, datetime
from typing import Optional, Tuple

from sqlalchemy import Column, Integer, Numeric, Date, Boolean, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, check_transition


class LeaseStatus(str, enum.Enum):
     """Enumeration for lease lifecycle status."""
     PENDING = "PENDING"
     ACTIVE = "ACTIVE"
     ENDED = "ENDED"


LEASE_TRANSITIONS = {
     LeaseStatus.PENDING: frozenset({LeaseStatus.ACTIVE}),
     LeaseStatus.ACTIVE: frozenset({LeaseStatus.ENDED}),
}


class InventoryType(str, enum.Enum):
     """Move-in / move-out inventory."""
     IN = "in"
     OUT = "out"


class Lease(Base):
     """
     Lease model - rental agreement issued from an accepted application.

     tenant_id is the primary occupant; co-tenants are LeaseTenant rows.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     application_id = Column(Integer, ForeignKey("applications.id", ondelete="SET NULL"), nullable=True)

     # Lease period
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=True)

     # Pricing
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     deposit = Column(Numeric(12, 2), nullable=True)
     charges = Column(Numeric(12, 2), default=0, nullable=False)

     status = Column(
          Enum(LeaseStatus, name="lease_status", create_constraint=True),
          default=LeaseStatus.PENDING,
          nullable=False,
          index=True
     )

     # Inventory (état des lieux) gates for activation / ending
     inventory_in_done = Column(Boolean, default=False, nullable=False)
     inventory_in_at = Column(DateTime, nullable=True)
     inventory_in_by = Column(Integer, ForeignKey("users.id"), nullable=True)
     inventory_out_done = Column(Boolean, default=False, nullable=False)
     inventory_out_at = Column(DateTime, nullable=True)
     inventory_out_by = Column(Integer, ForeignKey("users.id"), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Must stay above the `property` relationship, which shadows the builtin in this class body
     @property
     def total_monthly_amount(self):
          return self.monthly_rent + (self.charges or 0)

     @property
     def active_occupants(self) -> list:
          return [o for o in self.occupants if o.is_active]

     # Relationships
     property = relationship("Property", back_populates="leases")
     tenant = relationship("User", foreign_keys=[tenant_id])
     occupants = relationship(
          "LeaseTenant",
          back_populates="lease",
          cascade="all, delete-orphan",
          order_by="LeaseTenant.joined_at",
     )
     receipts = relationship("Receipt", back_populates="lease", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Lease(id={self.id}, tenant_id={self.tenant_id}, property_id={self.property_id}, status='{self.status.value}')>"

     def can_activate(self) -> Tuple[bool, Optional[str]]:
          """Gate for PENDING -> ACTIVE: move-in inventory must be recorded."""
          if self.status != LeaseStatus.PENDING:
               return False, "Only a pending lease can be activated"
          if not self.inventory_in_done:
               return False, "The move-in inventory must be confirmed before activating the lease"
          return True, None

     def can_end(self) -> Tuple[bool, Optional[str]]:
          """Gate for ACTIVE -> ENDED: move-out inventory must be recorded."""
          if self.status != LeaseStatus.ACTIVE:
               return False, "Only an active lease can be ended"
          if not self.inventory_out_done:
               return False, "The move-out inventory must be confirmed before ending the lease"
          return True, None

     def activate(self) -> None:
          check_transition(self.status, LeaseStatus.ACTIVE, LEASE_TRANSITIONS, "Lease")
          self.status = LeaseStatus.ACTIVE

     def end(self, on: date) -> None:
          check_transition(self.status, LeaseStatus.ENDED, LEASE_TRANSITIONS, "Lease")
          self.status = LeaseStatus.ENDED
          self.end_date = on

     def record_inventory(self, kind: InventoryType, at: datetime, by: int) -> None:
          if kind == InventoryType.IN:
               self.inventory_in_done = True
               self.inventory_in_at = at
               self.inventory_in_by = by
          else:
               self.inventory_out_done = True
               self.inventory_out_at = at
               self.inventory_out_by = by
