"""Query building — turns fetch arguments and builder state into a Solr request.

``QueryRequest`` is immutable; it renders to the parameters of Solr's
``/select`` handler but never executes anything itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MATCH_ALL = "*:*"

ORDER_ASC = "ASC"
ORDER_DESC = "DESC"


class SortOrder(str, Enum):
    """Sort direction as understood by Solr."""

    ASC = "asc"
    DESC = "desc"


class Pagination(BaseModel):
    """Result window requested through ``limit(limit, page)``.

    ``limit <= 0`` means no window limiting at all; pages are 1-based and any
    page ``<= 0`` starts at offset 0.
    """

    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=0, description="Maximum number of rows (<= 0 = unlimited)")
    page: int = Field(default=0, description="1-based page number (<= 0 = first page)")

    @property
    def rows(self) -> int | None:
        return self.limit if self.limit > 0 else None

    @property
    def start(self) -> int | None:
        if self.limit <= 0:
            return None
        return self.limit * (self.page - 1) if self.page > 0 else 0


SortFields = Mapping[str, Any] | Iterable[str | tuple[str, Any]]


def _direction(value: Any) -> SortOrder:
    if value is SortOrder.DESC or value == ORDER_DESC:
        return SortOrder.DESC
    return SortOrder.ASC


def parse_sort_fields(sort_fields: SortFields = ()) -> dict[str, SortOrder]:
    """Normalize the accepted sort shapes into an ordered field → direction map.

    Accepts ``{"name": "ASC", "type": "DESC"}``, ``["name", "type"]`` or a mix
    such as ``["name", ("type", "DESC")]``. Only the exact ``"DESC"`` token
    (or ``SortOrder.DESC``) sorts descending; everything else is ascending.

    Raises:
        ValueError: If an item is neither a name nor a two-item pair.
    """
    items: Iterable[Any] = sort_fields.items() if isinstance(sort_fields, Mapping) else sort_fields
    if isinstance(items, str):
        items = [items]

    spec: dict[str, SortOrder] = {}
    for item in items:
        if isinstance(item, str):
            spec[item] = SortOrder.ASC
        elif isinstance(item, Sequence) and len(item) == 2:
            field, order = item
            spec[str(field)] = _direction(order)
        else:
            raise ValueError(f"Sort field must be a name or a (name, direction) pair, got {item!r}")
    return spec


class QueryRequest(BaseModel):
    """An immutable Solr ``/select`` request."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(default=MATCH_ALL, description="Main query (q)")
    filter_queries: tuple[str, ...] = Field(default=(), description="Filter queries (fq), ANDed with q")
    fields: tuple[str, ...] = Field(default=(), description="Field projection (fl), in order")
    start: int | None = Field(default=None, description="Result offset, None = Solr default")
    rows: int | None = Field(default=None, description="Result window size, None = Solr default")
    sort: tuple[tuple[str, SortOrder], ...] = Field(default=(), description="Sort keys, primary first")

    def to_params(self) -> list[tuple[str, str]]:
        """Render the request as ``/select`` query parameters."""
        params: list[tuple[str, str]] = [("q", self.query)]
        params.extend(("fq", fq) for fq in self.filter_queries)
        if self.fields:
            params.append(("fl", ",".join(self.fields)))
        if self.start is not None:
            params.append(("start", str(self.start)))
        if self.rows is not None:
            params.append(("rows", str(self.rows)))
        if self.sort:
            params.append(("sort", ",".join(f"{field} {order.value}" for field, order in self.sort)))
        params.append(("wt", "json"))
        return params


def build_query(
    fields: Iterable[str] = (),
    query_string: str = MATCH_ALL,
    filter_query: str = "",
    pagination: Pagination | None = None,
    sort_spec: Mapping[str, SortOrder] | None = None,
) -> QueryRequest:
    """Build a ``QueryRequest`` from fetch arguments and builder state.

    Args:
        fields: Fields to return, in order. Empty keeps Solr's default projection.
        query_string: Main query; an empty value falls back to match-all.
        filter_query: Optional filter query attached as ``fq``.
        pagination: Result window; ``None`` or ``limit <= 0`` requests no window.
        sort_spec: Ordered field → direction mapping.

    Returns:
        The request, ready to be submitted.
    """
    pagination = pagination or Pagination()
    filter_query = str(filter_query) if filter_query else ""

    return QueryRequest(
        query=str(query_string) if query_string else MATCH_ALL,
        filter_queries=(filter_query,) if filter_query else (),
        fields=tuple(str(f) for f in fields),
        start=pagination.start,
        rows=pagination.rows,
        sort=tuple((sort_spec or {}).items()),
    )
