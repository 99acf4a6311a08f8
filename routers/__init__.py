# routers/__init__.py
from . import applications, leases, lease_tenants, payments, receipts

ALL_ROUTERS = [
     applications.router,
     leases.router,
     lease_tenants.router,
     payments.router,
     receipts.router,
]

__all__ = ["ALL_ROUTERS"]
