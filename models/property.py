# models/property.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Property(Base):
     """
     Property model - a rentable home owned by one landlord user.

     `available` and `occupant_id` are cached fields kept in step with the
     latest non-ENDED lease by the lease service.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     title = Column(String(255), nullable=False)
     city = Column(String(100), nullable=True)
     rent = Column(Numeric(12, 2), nullable=True)

     available = Column(Boolean, default=True, nullable=False)
     occupant_id = Column(Integer, ForeignKey("users.id"), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     owner = relationship("User", back_populates="properties", foreign_keys=[owner_id])
     occupant = relationship("User", foreign_keys=[occupant_id])
     applications = relationship("Application", back_populates="property")
     leases = relationship("Lease", back_populates="property")

     def __repr__(self):
          return f"<Property(id={self.id}, title='{self.title}', available={self.available})>"

     def is_owned_by(self, user_id: int) -> bool:
          return self.owner_id == user_id

     def mark_leased(self, tenant_id: int) -> None:
          """Flag the property as taken by the given tenant."""
          self.available = False
          self.occupant_id = tenant_id

     def mark_vacant(self) -> None:
          self.available = True
          self.occupant_id = None
