from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[T]):
    status: Literal["success"] = "success"
    statusCode: int
    data: T

    @classmethod
    def success(cls, data: T, status_code: int = 200) -> "ApiResponse[T]":
        return cls(statusCode=status_code, data=data)

    @classmethod
    def created(cls, data: T) -> "ApiResponse[T]":
        return cls(statusCode=201, data=data)


class MessageResponse(BaseModel):
    message: str
