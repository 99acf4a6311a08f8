# schemas/__init__.py
from .common import CamelModel, ErrorResponse
from .application import (
     ApplicationCreate,
     ApplicationUpdate,
     ApplicationResponse,
     ApplicationEnvelope,
     ApplicationCreateResponse,
     ApplicationListResponse,
)
from .lease import (
     LeaseAction,
     LeaseCreate,
     LeaseTransition,
     InventoryRecord,
     LeaseResponse,
     LeaseEnvelope,
     LeaseCreateResponse,
     LeaseListResponse,
)
from .lease_tenant import (
     OccupantCreate,
     OccupantUpdate,
     OccupantResponse,
     OccupantEnvelope,
     OccupantListResponse,
)
from .payment import (
     PaymentDeclareRequest,
     OwnerConfirmRequest,
     ReceiptResponse,
     ReceiptEnvelope,
     ReceiptListResponse,
     ReminderResponse,
)

__all__ = [
     "CamelModel",
     "ErrorResponse",
     "ApplicationCreate",
     "ApplicationUpdate",
     "ApplicationResponse",
     "ApplicationEnvelope",
     "ApplicationCreateResponse",
     "ApplicationListResponse",
     "LeaseAction",
     "LeaseCreate",
     "LeaseTransition",
     "InventoryRecord",
     "LeaseResponse",
     "LeaseEnvelope",
     "LeaseCreateResponse",
     "LeaseListResponse",
     "OccupantCreate",
     "OccupantUpdate",
     "OccupantResponse",
     "OccupantEnvelope",
     "OccupantListResponse",
     "PaymentDeclareRequest",
     "OwnerConfirmRequest",
     "ReceiptResponse",
     "ReceiptEnvelope",
     "ReceiptListResponse",
     "ReminderResponse",
]
