# stockroom/schemas/common.py
import math
from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    data: list[T]
    total: int
    page: int
    limit: int
    totalPages: int


class DataResponse(BaseModel, Generic[T]):
    message: str | None = None
    data: T


class ListResponse(BaseModel, Generic[T]):
    data: list[T]


class MessageResponse(BaseModel):
    message: str


class PageParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=200)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def build_page(items: Sequence, total: int, params: PageParams) -> dict:
    return {
        "data": list(items),
        "total": total,
        "page": params.page,
        "limit": params.limit,
        "totalPages": math.ceil(total / params.limit) if total else 0,
    }
