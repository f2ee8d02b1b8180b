from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: list[T]


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    error: str | None = None
    errors: list[str] | None = None


def ok(model: type[T], item: Any) -> Envelope[T]:
    return Envelope[model](data=model.model_validate(item))


def ok_list(model: type[T], items: list[Any]) -> ListEnvelope[T]:
    data = [model.model_validate(item) for item in items]
    return ListEnvelope[model](count=len(data), data=data)


def error_body(message: str, error: str | None = None, errors: list[str] | None = None) -> dict:
    return ErrorEnvelope(message=message, error=error, errors=errors).model_dump(
        mode="json", exclude_none=True
    )
