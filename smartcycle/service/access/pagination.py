"""
Pagination
----------
"""
from math import ceil
from typing import Tuple, List, Dict, Any

from tortoise.queryset import QuerySet


async def paginate(query: QuerySet, page: int = 1, limit: int = 10) -> Tuple[List, Dict[str, Any]]:
    """
    Fetches a single page of the given query.

    :return: The items on the page, and the ``{page, limit, total, pages}`` description of it.
    """
    total = await query.count()
    items = await query.offset((page - 1) * limit).limit(limit)
    return items, {"page": page, "limit": limit, "total": total, "pages": ceil(total / limit)}
