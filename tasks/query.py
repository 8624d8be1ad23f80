"""
tasks/query.py -- Turns task listing parameters into SQL statements.

TaskQuery.from_params() parses the raw query-string values permissively:
nothing here raises. Bad page/limit values fall back to the defaults, an
unknown status simply matches no rows, and an empty search is ignored. The
listing UI would rather show "no results" than an error.

build_task_statements() composes:
  WHERE   owner_id = :owner                         (always)
          AND status = :status                      (if status given)
          AND relevance > 0                         (if search given)
  ORDER   relevance DESC, created_at DESC           (search -- overrides sort)
          created_at ASC                            (sort=oldest)
          due_date IS NULL, due_date ASC            (sort=dueDate, nulls last)
          created_at DESC                           (default, newest first)
  LIMIT / OFFSET from page and limit.

Every ordering ends with the primary key in the same direction as the main
key so pages are stable when timestamps tie.

Relevance is the number of (term, field) hits: each whitespace-separated
search term scores one point for appearing in the title and one for
appearing in the description, case-insensitively. A row matches when any
term hits.

The table is passed in rather than imported so this module stays free of
store state and can be exercised against any Table with the task columns.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from functools import reduce
from operator import add
from typing import Any, Optional

from sqlalchemy import Table, case, func, literal, select
from sqlalchemy.sql.expression import ColumnElement, Select

SORT_OLDEST = "oldest"
SORT_DUE_DATE = "dueDate"

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Ceiling for page and limit. Keeps (page - 1) * limit inside a signed 64-bit
# OFFSET, so an absurd page just lands past the last row.
MAX_PAGING_VALUE = 2**31 - 1

_LEADING_INT = re.compile(r"^\s*\+?(\d+)")


def coerce_positive_int(raw: Any, default: int) -> int:
    """Parse raw like a lenient integer parser: leading digits win.

    "3" -> 3, "2abc" -> 2, "0" / "-1" / "abc" / None -> default. Values above
    MAX_PAGING_VALUE are clamped to it.
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return min(raw, MAX_PAGING_VALUE) if raw > 0 else default
    if raw is None:
        return default
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return default
    digits = match.group(1).lstrip("0")
    if not digits:
        return default
    # Long digit runs are clamped before int(), which refuses very long strings.
    if len(digits) > len(str(MAX_PAGING_VALUE)):
        return MAX_PAGING_VALUE
    return min(int(digits), MAX_PAGING_VALUE)


def search_terms(search: Optional[str]) -> list[str]:
    """Split a search string into distinct lowercase terms, order preserved."""
    if not search:
        return []
    seen: set[str] = set()
    terms: list[str] = []
    for term in search.lower().split():
        if term not in seen:
            seen.add(term)
            terms.append(term)
    return terms


@dataclass(frozen=True)
class TaskQuery:
    owner_id: int
    status: Optional[str] = None
    search: Optional[str] = None
    sort: Optional[str] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_params(
        cls,
        owner_id: int,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        page: Any = None,
        limit: Any = None,
    ) -> "TaskQuery":
        return cls(
            owner_id=owner_id,
            status=status or None,
            search=search if search_terms(search) else None,
            sort=sort or None,
            page=coerce_positive_int(page, DEFAULT_PAGE),
            limit=coerce_positive_int(limit, DEFAULT_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def relevance_score(table: Table, terms: list[str]) -> ColumnElement:
    """Sum of per-term, per-field hits for title and description."""
    parts: list[ColumnElement] = []
    for term in terms:
        pattern = _like_pattern(term)
        parts.append(case((table.c.title.ilike(pattern, escape="\\"), 1), else_=0))
        parts.append(case((table.c.description.ilike(pattern, escape="\\"), 1), else_=0))
    return reduce(add, parts, literal(0))


def _order_by(query: TaskQuery, table: Table, score: Optional[ColumnElement]) -> list:
    if score is not None:
        return [score.desc(), table.c.created_at.desc(), table.c.id.desc()]
    if query.sort == SORT_OLDEST:
        return [table.c.created_at.asc(), table.c.id.asc()]
    if query.sort == SORT_DUE_DATE:
        return [table.c.due_date.is_(None), table.c.due_date.asc(), table.c.id.asc()]
    return [table.c.created_at.desc(), table.c.id.desc()]


def build_task_statements(query: TaskQuery, table: Table) -> tuple[Select, Select]:
    """Return (page_select, count_select) for query against table.

    Both share the same WHERE clause, so count_select's single scalar is the
    total number of matches ignoring pagination.
    """
    conditions = [table.c.owner_id == query.owner_id]
    if query.status is not None:
        conditions.append(table.c.status == query.status)

    score = None
    terms = search_terms(query.search)
    if terms:
        score = relevance_score(table, terms)
        conditions.append(score > 0)

    page_stmt = (
        select(table)
        .where(*conditions)
        .order_by(*_order_by(query, table, score))
        .limit(query.limit)
        .offset(query.offset)
    )
    count_stmt = select(func.count()).select_from(table).where(*conditions)
    return page_stmt, count_stmt
