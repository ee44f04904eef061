"""Common Pydantic schemas used across the API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while using snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Standard API error response."""

    success: bool = False
    error: str
    details: Optional[List[Dict[str, Any]]] = None
