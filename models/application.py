# models/application.py
import enum
from datetime import datetime

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, check_transition


class ApplicationStatus(str, enum.Enum):
     """Enumeration for tenancy application status."""
     PENDING = "PENDING"
     ACCEPTED = "ACCEPTED"
     REJECTED = "REJECTED"
     CANCELLED = "CANCELLED"

     @classmethod
     def active(cls) -> tuple:
          """Statuses that block a second application for the same property."""
          return (cls.PENDING, cls.ACCEPTED)


APPLICATION_TRANSITIONS = {
     ApplicationStatus.PENDING: frozenset({
          ApplicationStatus.ACCEPTED,
          ApplicationStatus.REJECTED,
          ApplicationStatus.CANCELLED,
     }),
}


class Application(Base):
     """
     Application model - a tenant's request to rent a property.

     updated_at is stamped explicitly on every status change; for CANCELLED
     applications it is the start of the reapplication cooldown.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(
          Integer,
          ForeignKey("properties.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     tenant_id = Column(
          Integer,
          ForeignKey("users.id"),
          nullable=False,
          index=True
     )
     status = Column(
          Enum(ApplicationStatus, name="application_status", create_constraint=True),
          default=ApplicationStatus.PENDING,
          nullable=False,
          index=True
     )
     message = Column(Text, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     property = relationship("Property", back_populates="applications")
     tenant = relationship("User")
     shared_documents = relationship(
          "ApplicationDocument",
          back_populates="application",
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return f"<Application(id={self.id}, property_id={self.property_id}, status='{self.status.value}')>"

     def transition_to(self, target: ApplicationStatus, at: datetime) -> None:
          check_transition(self.status, target, APPLICATION_TRANSITIONS, "Application")
          self.status = target
          self.updated_at = at

     def accept(self, at: datetime) -> None:
          self.transition_to(ApplicationStatus.ACCEPTED, at)

     def reject(self, at: datetime) -> None:
          self.transition_to(ApplicationStatus.REJECTED, at)

     def cancel(self, at: datetime) -> None:
          self.transition_to(ApplicationStatus.CANCELLED, at)
