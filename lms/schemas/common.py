"""Shared / generic schemas."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for API schemas: camelCase on the wire, snake_case in Python.

    Input accepts either spelling; output is always camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope used by every endpoint."""

    status: Literal["SUCCESS", "ERROR"] = "SUCCESS"
    message: str
    data: T | None = None


def ok(message: str, data: Any = None) -> dict[str, Any]:
    """Build a SUCCESS envelope; FastAPI validates it against the route's model."""
    return {"status": "SUCCESS", "message": message, "data": data}


def error(message: str) -> dict[str, Any]:
    return {"status": "ERROR", "message": message, "data": None}


class PagedResponse(CamelModel, Generic[T]):
    """One page of a sorted listing."""

    content: list[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    last: bool
