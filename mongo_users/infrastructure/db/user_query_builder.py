"""
Builds MongoDB filters, pagination and sort directives for user searches,
plus the aggregation pipeline behind department statistics.

A search is a conjunction: every criterion that is set must hold. No
criteria at all yields the empty filter, which matches every document.
Without a sort field the store's natural order applies, which is not
guaranteed to be stable.
"""
# Standard library imports
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

# External package imports
from pymongo import ASCENDING, DESCENDING

# Local application imports
from ...application.dto.user_dto import UserSearchCriteria
from ...domain.constants import DepartmentStatsFields, UserFields

SortSpec = List[Tuple[str, int]]


@dataclass(frozen=True)
class UserQuery:
    """Filter plus pagination/sort, ready to hand to Collection.find()"""
    filter: Dict[str, Any]
    skip: int
    limit: int
    sort: Optional[SortSpec] = None


def name_contains(name: str) -> Dict[str, Any]:
    """Case-insensitive substring match; regex metacharacters are taken literally."""
    return {"$regex": re.escape(name), "$options": "i"}


def build_user_filter(criteria: UserSearchCriteria) -> Dict[str, Any]:
    """
    Translate the set criteria into a filter document.

    Each criterion constrains a different field, so a flat document is
    already an implicit AND.
    """
    query: Dict[str, Any] = {}
    if criteria.name:
        query[UserFields.NAME] = name_contains(criteria.name)
    if criteria.department is not None:
        query[UserFields.DEPARTMENT] = criteria.department
    if criteria.active is not None:
        query[UserFields.ACTIVE] = criteria.active
    return query


def build_sort(criteria: UserSearchCriteria) -> Optional[SortSpec]:
    if not criteria.sort_by:
        return None
    if criteria.sort_by not in UserFields.SORTABLE:
        raise ValueError(f"Cannot sort users by '{criteria.sort_by}'")
    direction = DESCENDING if criteria.sort_direction == "desc" else ASCENDING
    return [(criteria.sort_by, direction)]


def build_pagination(page: int, size: int, default_page_size: int) -> Tuple[int, int]:
    """
    Return (skip, limit) for a page.

    size=0 means "use default_page_size".
    """
    if page < 0 or size < 0:
        raise ValueError(f"page and size must be non-negative (page={page}, size={size})")
    if default_page_size <= 0:
        raise ValueError(f"default page size must be positive, got {default_page_size}")
    limit = size or default_page_size
    return page * limit, limit


def build_user_query(criteria: UserSearchCriteria, default_page_size: int) -> UserQuery:
    """Build the full search query (filter, skip, limit, sort) from criteria."""
    skip, limit = build_pagination(criteria.page, criteria.size, default_page_size)
    return UserQuery(
        filter=build_user_filter(criteria),
        skip=skip,
        limit=limit,
        sort=build_sort(criteria),
    )


def department_filter(department: str) -> Dict[str, Any]:
    """Exact department match."""
    return {UserFields.DEPARTMENT: department}


def department_stats_pipeline() -> List[Dict[str, Any]]:
    """
    Group users by department, counting all and active users, largest first.

    Equivalent shell pipeline:
        [{$group: {_id: "$department",
                   totalUsers: {$sum: 1},
                   activeUsers: {$sum: {$cond: [{$eq: ["$active", true]}, 1, 0]}}}},
         {$sort: {totalUsers: -1, _id: 1}}]
    """
    return [
        {
            "$group": {
                DepartmentStatsFields.DEPARTMENT: f"${UserFields.DEPARTMENT}",
                DepartmentStatsFields.TOTAL_USERS: {"$sum": 1},
                DepartmentStatsFields.ACTIVE_USERS: {
                    "$sum": {"$cond": [{"$eq": [f"${UserFields.ACTIVE}", True]}, 1, 0]}
                },
            }
        },
        # department name breaks ties so equal totals come back in a fixed order
        {"$sort": {DepartmentStatsFields.TOTAL_USERS: DESCENDING, DepartmentStatsFields.DEPARTMENT: ASCENDING}},
    ]
