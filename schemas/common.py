# schemas/common.py
"""
Shared pydantic base for the API: camelCase on the wire, snake_case in Python.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
     """Accepts either field names or camelCase aliases; serializes by alias."""

     model_config = ConfigDict(
          alias_generator=to_camel,
          populate_by_name=True,
          from_attributes=True,
     )


class ErrorResponse(BaseModel):
     """Body of every error response."""
     error: str
     message: Optional[str] = None
