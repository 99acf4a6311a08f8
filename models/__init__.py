# models/__init__.py
from .base import Base
from .user import User
from .property import Property
from .document import Document, ApplicationDocument
from .application import Application, ApplicationStatus
from .lease import Lease, LeaseStatus, InventoryType
from .lease_tenant import LeaseTenant, OccupancyState
from .receipt import Receipt, ReceiptStatus
from .notification import Notification

__all__ = [
     "Base",
     "User",
     "Property",
     "Document",
     "ApplicationDocument",
     "Application",
     "ApplicationStatus",
     "Lease",
     "LeaseStatus",
     "InventoryType",
     "LeaseTenant",
     "OccupancyState",
     "Receipt",
     "ReceiptStatus",
     "Notification",
]
