"""Shared response envelope and schema base."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


class CamelModel(BaseModel):
    """Schema that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[T]):
    """Uniform ``{success, data|message}`` envelope for every endpoint."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


def ok(data=None, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(success=True, data=data, message=message)
