"""Pagination schemas and utilities."""

import math
from typing import Any, List, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema speaking camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(BaseModel):
    """Page metadata returned next to a page of results."""

    page: int = Field(description="1-based page number")
    limit: int = Field(description="Maximum items per page")
    total: int = Field(description="Total number of items matching the query")
    pages: int = Field(description="Number of pages available")

    @classmethod
    def create(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


def paginate_query(query, page: int = 1, limit: int = 50) -> Tuple[List[Any], int]:
    """
    Apply page-based pagination to a SQLAlchemy query.

    Args:
        query: SQLAlchemy query object
        page: 1-based page number
        limit: Maximum items to return

    Returns:
        Tuple of (page items, total count)
    """
    total = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total
