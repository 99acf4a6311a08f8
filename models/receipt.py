# models/receipt.py
import enum
from datetime import datetime

from sqlalchemy import (
     Column, Integer, String, Numeric, DateTime, ForeignKey, Enum,
     UniqueConstraint, CheckConstraint, func,
)
from sqlalchemy.orm import relationship
from .base import Base, check_transition


class ReceiptStatus(str, enum.Enum):
     """Enumeration for rent receipt status."""
     DECLARED = "DECLARED"
     CONFIRMED = "CONFIRMED"


RECEIPT_TRANSITIONS = {
     ReceiptStatus.DECLARED: frozenset({ReceiptStatus.CONFIRMED}),
}


class Receipt(Base):
     """
     Receipt model - one rent period (month/year) of a lease.

     Created DECLARED by a tenant and confirmed by the owner, or created
     CONFIRMED directly (owner bookkeeping, retroactive backfill).
     """
     __table_args__ = (
          UniqueConstraint("lease_id", "month", "year", name="uq_receipts_lease_period"),
          CheckConstraint("month >= 1 AND month <= 12", name="ck_receipts_month_range"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     month = Column(Integer, nullable=False)
     year = Column(Integer, nullable=False)

     # Amounts
     rent_amount = Column(Numeric(12, 2), nullable=False)
     charges = Column(Numeric(12, 2), default=0, nullable=False)
     total_amount = Column(Numeric(12, 2), nullable=False)

     status = Column(
          Enum(ReceiptStatus, name="receipt_status", create_constraint=True),
          default=ReceiptStatus.DECLARED,
          nullable=False,
          index=True
     )
     payment_method = Column(String(50), default="transfer", nullable=False)
     declared_at = Column(DateTime, nullable=True)
     paid_at = Column(DateTime, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     lease = relationship("Lease", back_populates="receipts")

     def __repr__(self):
          return f"<Receipt(id={self.id}, lease_id={self.lease_id}, period={self.year}-{self.month:02d}, status='{self.status.value}')>"

     @property
     def period(self) -> tuple:
          return (self.year, self.month)

     def confirm(self, at: datetime) -> None:
          """Mark a declared payment as received."""
          check_transition(self.status, ReceiptStatus.CONFIRMED, RECEIPT_TRANSITIONS, "Receipt")
          self.status = ReceiptStatus.CONFIRMED
          self.paid_at = at
