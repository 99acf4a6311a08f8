# models/document.py
"""
Document ownership records.

File contents live in external storage; only the owner and URL are kept
here so applications can check that shared documents belong to the tenant.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Document(Base):
     id = Column(Integer, primary_key=True, autoincrement=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     name = Column(String(255), nullable=False)
     url = Column(String(500), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Document(id={self.id}, owner_id={self.owner_id})>"


class ApplicationDocument(Base):
     """Link sharing one tenant document with the owner through an application."""

     application_id = Column(
          Integer,
          ForeignKey("applications.id", ondelete="CASCADE"),
          primary_key=True,
     )
     document_id = Column(
          Integer,
          ForeignKey("documents.id", ondelete="CASCADE"),
          primary_key=True,
     )
     shared_at = Column(DateTime, server_default=func.now(), nullable=False)

     application = relationship("Application", back_populates="shared_documents")
     document = relationship("Document")
