# models/user.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class User(Base):
     """
     User model - platform account.
     Role capabilities are flags: one account can be both owner and tenant.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=False)
     is_tenant = Column(Boolean, default=False, nullable=False)
     is_owner = Column(Boolean, default=False, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     properties = relationship(
          "Property",
          back_populates="owner",
          foreign_keys="Property.owner_id",
     )

     @property
     def full_name(self) -> str:
          return f"{self.first_name} {self.last_name}"

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}')>"
