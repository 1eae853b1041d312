from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from portal.models.submission import Submission
from portal.services.submissions import submission_to_summary

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_SORT = "createdAt"
DEFAULT_ORDER = "DESC"

# Client-facing sort names and their columns. Lookup keys are lower-cased.
SORT_FIELDS: dict[str, str] = {
    "createdat": "created_at",
    "created_at": "created_at",
    "status": "status",
    "nama": "nama",
    "email": "email",
}
SORT_ORDERS = {"ASC", "DESC"}


@dataclass(frozen=True)
class ListingParams:
    search: str | None
    status: str | None
    sort_column: str
    sort_order: str
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _parse_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def resolve_sort(sort: str | None, order: str | None) -> tuple[str, str]:
    """Unknown sort fields fall back to ``created_at DESC`` without error."""
    column = SORT_FIELDS.get((sort or "").strip().lower())
    if column is None:
        return "created_at", DEFAULT_ORDER
    normalized_order = (order or "").strip().upper()
    if normalized_order not in SORT_ORDERS:
        normalized_order = DEFAULT_ORDER
    return column, normalized_order


def build_params(
    *,
    search: str | None = None,
    status: str | None = None,
    sort: str | None = None,
    order: str | None = None,
    page: Any = None,
    limit: Any = None,
) -> ListingParams:
    sort_column, sort_order = resolve_sort(sort, order)
    search_term = (search or "").strip() or None
    status_filter = (status or "").strip().upper() or None
    return ListingParams(
        search=search_term,
        status=status_filter,
        sort_column=sort_column,
        sort_order=sort_order,
        page=max(DEFAULT_PAGE, _parse_int(page, DEFAULT_PAGE)),
        limit=min(MAX_LIMIT, max(1, _parse_int(limit, DEFAULT_LIMIT))),
    )


def build_pagination(total_count: int, page: int, limit: int) -> dict[str, Any]:
    total_pages = math.ceil(total_count / limit) if limit else 0
    has_next_page = page < total_pages
    has_prev_page = page > 1
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalCount": total_count,
        "limit": limit,
        "hasNextPage": has_next_page,
        "hasPrevPage": has_prev_page,
        "nextPage": page + 1 if has_next_page else None,
        "prevPage": page - 1 if has_prev_page else None,
    }


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def query_submissions(db: Session, params: ListingParams) -> tuple[list[Submission], int]:
    query = db.query(Submission)
    if params.search:
        pattern = f"%{_escape_like(params.search)}%"
        query = query.filter(
            or_(
                Submission.nama.ilike(pattern, escape="\\"),
                Submission.email.ilike(pattern, escape="\\"),
                Submission.tracking_code.ilike(pattern, escape="\\"),
            )
        )
    if params.status:
        query = query.filter(Submission.status == params.status)

    total_count = query.order_by(None).count()

    column = getattr(Submission, params.sort_column)
    ordering = column.asc() if params.sort_order == "ASC" else column.desc()
    items = (
        query.order_by(ordering, Submission.id.asc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return items, total_count


def list_submissions(
    db: Session,
    *,
    search: str | None = None,
    status: str | None = None,
    sort: str | None = None,
    order: str | None = None,
    page: Any = None,
    limit: Any = None,
) -> dict[str, Any]:
    params = build_params(search=search, status=status, sort=sort, order=order, page=page, limit=limit)
    items, total_count = query_submissions(db, params)
    return {
        "success": True,
        "data": [submission_to_summary(item) for item in items],
        "pagination": build_pagination(total_count, params.page, params.limit),
        "filters": {
            "search": search or None,
            "status": status or None,
            "sort": sort or DEFAULT_SORT,
            "order": (order or DEFAULT_ORDER).upper(),
        },
    }
