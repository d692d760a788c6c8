"""Response envelopes shared by every endpoint."""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from dealboard.core.exceptions import DealboardException

T = TypeVar("T")


class PaginationMeta(BaseModel):
    page: int = 1
    limit: int = 12
    total: int = 0
    total_pages: int = 0

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = (total + limit - 1) // limit if total > 0 else 0
        return cls(page=page, limit=limit, total=total, total_pages=total_pages)


class ApiResponse(BaseModel, Generic[T]):
    """Successful response: ``data`` plus pagination ``meta`` for lists."""

    status: str = "success"
    data: T
    meta: Optional[PaginationMeta] = None


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Failed response.

    ``data`` is only set when the failure still has a useful payload, such as
    the restored counters after a rejected or failed vote.
    """

    status: str = "error"
    error: ErrorDetail
    data: Optional[Any] = None

    @classmethod
    def build(cls, code: str, message: str, data: Any = None) -> "ErrorResponse":
        return cls(error=ErrorDetail(code=code, message=message), data=data)

    @classmethod
    def from_exception(cls, exc: DealboardException) -> "ErrorResponse":
        return cls.build(exc.code, exc.message)

    def to_content(self) -> dict:
        """JSON-ready body, without ``data`` when there is none."""
        content = self.model_dump(mode="json")
        if content["data"] is None:
            del content["data"]
        return content
