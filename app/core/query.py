"""
Filter and pagination primitives shared by every list endpoint.

A request's filters are captured in a QueryFilter (a plain value object that
can be built and inspected without a database) and applied to a SQLAlchemy
query at the repo layer. Page/sort parameters travel as PageParams; the repo
returns (items, total) and routers wrap that in the paginated envelope.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from fastapi import Query
from sqlalchemy import or_

from app.config import settings
from app.core.errors import ValidationFailed

ALL = "all"


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class QueryFilter:
    """Structured predicate: exact-match terms plus an optional substring search."""

    equals: dict[str, Any] = field(default_factory=dict)
    search: str | None = None
    search_fields: tuple[str, ...] = ()

    def where(self, name: str, value: Any) -> "QueryFilter":
        """
        Add an exact-match term. None and "all" mean no filter on that field.
        Any other value, including an empty string, is matched literally.
        """
        if value is None or value == ALL:
            return self
        return replace(self, equals={**self.equals, name: value})

    def matching(self, term: str | None, fields: Iterable[str]) -> "QueryFilter":
        """Case-insensitive substring search over fields. Blank terms are ignored."""
        if term is None or not term.strip():
            return self
        return replace(self, search=term.strip(), search_fields=tuple(fields))

    @property
    def is_empty(self) -> bool:
        return not self.equals and not self.search

    def apply(self, q, model):
        for name, value in self.equals.items():
            q = q.filter(getattr(model, name) == value)
        if self.search and self.search_fields:
            pattern = f"%{_escape_like(self.search)}%"
            q = q.filter(
                or_(*(getattr(model, f).ilike(pattern, escape="\\") for f in self.search_fields))
            )
        return q


@dataclass(frozen=True)
class PageParams:
    page: int = 1
    limit: int = 10
    sort_by: str = "createdAt"
    order: str = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def descending(self) -> bool:
        return self.order == "desc"

    def pages(self, total: int) -> int:
        return math.ceil(total / self.limit) if total else 0


def page_params_for(sort_fields: Iterable[str]):
    """
    Build a FastAPI dependency reading page/limit/sortBy/order from the query
    string. sortBy must be one of sort_fields.
    """
    allowed = tuple(sort_fields)

    def _page_params(
        page: int = Query(1, ge=1),
        limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
        sortBy: str = Query("createdAt"),
        order: str = Query("desc", pattern="^(asc|desc)$"),
    ) -> PageParams:
        if sortBy not in allowed:
            raise ValidationFailed(
                errors=[
                    {
                        "field": "sortBy",
                        "message": f"sortBy must be one of: {', '.join(allowed)}",
                        "location": "query",
                    }
                ]
            )
        return PageParams(
            page=page,
            limit=limit,
            sort_by=sortBy,
            order=order,
        )

    return _page_params


def fetch_page(q, params: PageParams, sort_columns: dict, tie_breaker, options=()) -> tuple[list, int]:
    """
    Run the filtered query twice: once for the total, once for the requested
    slice ordered by the chosen column with tie_breaker as a stable second key.
    Loader options only apply to the slice. params.sort_by must already be a
    key of sort_columns (page_params_for checks it).
    """
    column = sort_columns[params.sort_by]
    total = q.count()
    if params.descending:
        ordering = (column.desc(), tie_breaker.desc())
    else:
        ordering = (column.asc(), tie_breaker.asc())
    items = q.options(*options).order_by(*ordering).offset(params.offset).limit(params.limit).all()
    return items, total


def paginated(items: list, total: int, params: PageParams) -> dict:
    return {
        "success": True,
        "count": len(items),
        "total": total,
        "pagination": {"page": params.page, "pages": params.pages(total)},
        "data": items,
    }
