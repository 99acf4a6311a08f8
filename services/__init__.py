# services/__init__.py
from .clock import Clock, SystemClock, DeterministicClock
from .identity import Identity
from .notification_service import DispatchResult, NotificationDispatcher, NotificationSink
from .application_service import ApplicationService
from .lease_service import LeaseService, LeaseIssuance, months_between
from .colocation_service import ColocationService, OccupantRoster
from .payment_service import PaymentService

__all__ = [
     "Clock",
     "SystemClock",
     "DeterministicClock",
     "Identity",
     "DispatchResult",
     "NotificationDispatcher",
     "NotificationSink",
     "ApplicationService",
     "LeaseService",
     "LeaseIssuance",
     "months_between",
     "ColocationService",
     "OccupantRoster",
     "PaymentService",
]
