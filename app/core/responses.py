import math
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from app.config.settings import settings

T = TypeVar("T")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    error: Optional[Any] = None


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: List[T]
    pagination: Pagination


class Page(BaseModel, Generic[T]):
    """One page of rows as returned by a service."""
    items: List[T]
    pagination: Pagination


def _positive_int(value: Optional[str], default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def parse_paging(page: Optional[str], limit: Optional[str]) -> tuple[int, int]:
    """Lenient page/limit parsing: bad values fall back to the defaults, limit is capped"""
    return (
        _positive_int(page, 1),
        min(_positive_int(limit, settings.default_page_size), settings.max_page_size),
    )


def page_range(page: int, limit: int) -> tuple[int, int]:
    """Inclusive row range for PostgREST's range()"""
    start = (page - 1) * limit
    return start, start + limit - 1


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if limit else 0,
    )


def error_body(message: str, error: Any = None) -> dict:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body
