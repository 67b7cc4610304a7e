from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from ..common.validators import positive_int
from ..core.exceptions import ValidationError
from ..core.constants import DEFAULT_PAGE_LIMIT, FILTER_ALL
from ..core.enums import SortOrder

_PAGING = ("page", "limit", "sortBy", "sortOrder")
_RECORD_FILTERS = ("startDate", "endDate", "status")


@dataclass(frozen=True)
class QueryView:
    """A list endpoint and the query keys it understands.

    Keys outside ``keys`` are dropped when a shared state is sent to the view.
    """

    name: str
    keys: frozenset
    fixed: Mapping[str, Any] = field(default_factory=dict)


ATTENDANCE = QueryView(
    "attendance",
    frozenset(
        ("employeeId", *_RECORD_FILTERS, "department", "designation", "officeLocation", "shift", "search", *_PAGING)
    ),
)
MY_ATTENDANCE = QueryView("my_attendance", frozenset((*_RECORD_FILTERS, *_PAGING)))
TEAM_ATTENDANCE = QueryView("team_attendance", frozenset((*_RECORD_FILTERS, "search", *_PAGING)))
EMPLOYEE_SUMMARY = QueryView("summary", frozenset(("period",)), {"type": "summary"})
EMPLOYEE_RECORDS = QueryView("records", frozenset((*_RECORD_FILTERS, *_PAGING)), {"type": "records"})
EMPLOYEE_CALENDAR = QueryView("calendar", frozenset(("year", "month")), {"type": "calendar"})
TASKS = QueryView(
    "tasks",
    frozenset(("search", "status", "priority", "assignedTo", "deadlineStatus", "isActive", *_PAGING)),
)
MY_TASKS = QueryView("my_tasks", frozenset(("search", "status", "priority", "deadlineStatus", *_PAGING)))


@dataclass(frozen=True)
class QueryState:
    search: str = ""
    filters: Mapping[str, Any] = field(default_factory=dict)
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    sort_by: str = "date"
    sort_order: SortOrder = SortOrder.DESC

    def merged(self, patch: Mapping[str, Any]) -> "QueryState":
        """Apply a filter patch; any change other than a bare page move goes back to page 1."""
        patch = dict(patch)
        page_only = set(patch) == {"page"}

        filters = dict(self.filters)
        changes: dict[str, Any] = {}
        for key, value in patch.items():
            if key == "search":
                changes["search"] = (value or "").strip()
            elif key == "limit":
                changes["limit"] = positive_int(value, "limit")
            elif key == "sortBy":
                changes["sort_by"] = str(value)
            elif key == "sortOrder":
                changes["sort_order"] = _sort_order(value)
            elif key != "page":
                if value is None:
                    filters.pop(key, None)
                else:
                    filters[key] = value

        changes["page"] = positive_int(patch["page"], "page") if page_only else 1
        return replace(self, filters=filters, **changes)

    def sorted_by(self, key: str) -> "QueryState":
        order = self.sort_order.toggled() if key == self.sort_by else SortOrder.ASC
        return replace(self, sort_by=key, sort_order=order, page=1)

    def params(self, view: QueryView) -> dict[str, Any]:
        raw = {
            **self.filters,
            "search": self.search,
            "page": self.page,
            "limit": self.limit,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order.value,
        }
        out = dict(view.fixed)
        for key, value in raw.items():
            if key in view.keys and value not in (None, "", FILTER_ALL):
                out[key] = value
        return out


def state_from_args(args: Mapping[str, Any], initial: Optional[QueryState] = None) -> QueryState:
    """Rebuild a state from query-string arguments: filters first, then the page."""
    state = initial or QueryState()
    filters = {key: value for key, value in args.items() if key != "page"}
    if filters:
        state = state.merged(filters)
    if args.get("page"):
        state = state.merged({"page": args["page"]})
    return state


def _sort_order(value: Any) -> SortOrder:
    try:
        return SortOrder(str(value).lower())
    except ValueError:
        raise ValidationError("sortOrder must be asc or desc") from None
