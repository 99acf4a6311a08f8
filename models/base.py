# models/base.py
import re

from sqlalchemy.orm import DeclarativeBase, declared_attr

from exceptions import InvalidTransitionError


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Provides common configuration and mixins.
     """

     @declared_attr.directive
     def __tablename__(cls) -> str:
          """
          Automatically generate table name from class name.
          Example: LeaseTenant -> lease_tenants
          """
          name = re.sub(r'(?<!^)(?=[A-Z])', '_', cls.__name__).lower()
          # Pluralize (simple version)
          if name.endswith('y'):
               return name[:-1] + 'ies'
          elif name.endswith('s'):
               return name + 'es'
          return name + 's'


def check_transition(current, target, allowed: dict, entity: str) -> None:
     """
     Raise InvalidTransitionError unless target is reachable from current.

     `allowed` maps each status to the set of statuses it may move to.
     """
     if target not in allowed.get(current, frozenset()):
          raise InvalidTransitionError(
               f"{entity} cannot go from {current.value} to {target.value}"
          )
