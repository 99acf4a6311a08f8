# services/identity.py
from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
     """Resolved caller: user id plus role capability flags."""
     user_id: int
     email: str
     is_tenant: bool = False
     is_owner: bool = False

     @classmethod
     def from_user(cls, user) -> "Identity":
          return cls(
               user_id=user.id,
               email=user.email,
               is_tenant=bool(user.is_tenant),
               is_owner=bool(user.is_owner),
          )
