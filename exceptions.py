# exceptions.py
"""
Typed errors raised by models and the service layer.

Each class maps to one HTTP status (see main.py). Messages are written to be
shown to end users as-is.
"""
from typing import Optional


class RentalError(Exception):
     """Base exception for all business errors."""

     status_code = 500

     def __init__(self, message: str, detail: Optional[str] = None):
          super().__init__(message)
          self.message = message
          self.detail = detail


class UnauthenticatedError(RentalError):
     """No resolvable identity."""

     status_code = 401


class ForbiddenError(RentalError):
     """Identity resolved but lacks the required role or ownership."""

     status_code = 403


class NotFoundError(RentalError):
     """Referenced entity does not exist."""

     status_code = 404


class ConflictError(RentalError):
     """Business-rule violation."""

     status_code = 409


class ValidationError(RentalError):
     """Missing or malformed input."""

     status_code = 400


class EmailDeliveryError(Exception):
     """Raised by the email sink when a message cannot be handed off."""


class InvalidTransitionError(ConflictError):
     """A status change that is not allowed from the current state."""
