import asyncio

import httpx
import pytest

from src.hr_console.hr_console.attendance.http_attendance_repository import HttpAttendanceRepository
from src.hr_console.hr_console.backend.client import BackendClient, BackendConfig

from src.hr_console.hr_console.core.enums import SortOrder
from src.hr_console.hr_console.core.exceptions import (
    BackendError,
    BackendUnavailable,
    NetworkFailure,
    QueryRejected,
    ValidationError,
)
from src.hr_console.hr_console.queries.coordinator import QueryCoordinator
from src.hr_console.hr_console.queries.fetchers import build_fetcher
from src.hr_console.hr_console.queries.model import (
    ATTENDANCE,
    EMPLOYEE_CALENDAR,
    EMPLOYEE_RECORDS,
    MY_TASKS,
)


class RecordingFetch:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def __call__(self, view, params):
        self.calls.append((view.name, params))
        if self.error is not None:
            raise self.error
        return {"view": view.name, "params": params}


class ControlledFetch:
    """Each call parks on a future the test resolves in any order."""

    def __init__(self):
        self.calls = []

    async def __call__(self, view, params):
        future = asyncio.get_running_loop().create_future()
        self.calls.append((params, future))
        return await future


def test_every_change_issues_one_fetch():
    fetch = RecordingFetch()
    coordinator = QueryCoordinator(fetch, ATTENDANCE)

    asyncio.run(coordinator.update_filter({"status": "Late"}))
    asyncio.run(coordinator.update_sort("employeeName"))

    assert len(fetch.calls) == 2
    assert coordinator.result["params"]["status"] == "Late"
    assert coordinator.loading is False


def test_newest_request_wins_when_responses_arrive_out_of_order():
    fetch = ControlledFetch()
    coordinator = QueryCoordinator(fetch, ATTENDANCE)

    async def scenario():
        late = asyncio.create_task(coordinator.update_filter({"status": "Late"}))
        await asyncio.sleep(0)
        present = asyncio.create_task(coordinator.update_filter({"status": "Present"}))
        await asyncio.sleep(0)

        fetch.calls[1][1].set_result("present rows")
        await present
        fetch.calls[0][1].set_result("late rows")
        await late

    asyncio.run(scenario())

    assert [params["status"] for params, _ in fetch.calls] == ["Late", "Present"]
    assert coordinator.result == "present rows"
    assert coordinator.state.filters["status"] == "Present"


def test_stale_failure_does_not_override_newer_result():
    fetch = ControlledFetch()
    coordinator = QueryCoordinator(fetch, ATTENDANCE)

    async def scenario():
        first = asyncio.create_task(coordinator.update_filter({"status": "Late"}))
        await asyncio.sleep(0)
        second = asyncio.create_task(coordinator.update_filter({"status": "Present"}))
        await asyncio.sleep(0)

        fetch.calls[1][1].set_result("present rows")
        await second
        fetch.calls[0][1].set_exception(BackendUnavailable("down"))
        await first

    asyncio.run(scenario())

    assert coordinator.result == "present rows"
    assert coordinator.error is None


def test_filter_change_resets_page_but_page_move_does_not():
    fetch = RecordingFetch()
    coordinator = QueryCoordinator(fetch, ATTENDANCE)

    asyncio.run(coordinator.update_filter({"page": 3}))
    assert fetch.calls[-1][1]["page"] == 3

    asyncio.run(coordinator.update_filter({"department": "HR"}))
    assert fetch.calls[-1][1] == {
        "department": "HR",
        "page": 1,
        "limit": 30,
        "sortBy": "date",
        "sortOrder": "desc",
    }


def test_all_and_empty_values_are_not_sent():
    fetch = RecordingFetch()
    coordinator = QueryCoordinator(fetch, ATTENDANCE)

    asyncio.run(coordinator.update_filter({"status": "All", "search": "  ", "shift": None}))

    params = fetch.calls[-1][1]
    assert "status" not in params
    assert "search" not in params
    assert "shift" not in params


def test_sort_toggles_on_same_key_and_starts_ascending_on_new_key():
    fetch = RecordingFetch()
    coordinator = QueryCoordinator(fetch, ATTENDANCE)
    asyncio.run(coordinator.update_filter({"page": 4}))

    asyncio.run(coordinator.update_sort("date"))
    assert coordinator.state.sort_order is SortOrder.ASC
    assert coordinator.state.page == 1

    asyncio.run(coordinator.update_sort("date"))
    assert coordinator.state.sort_order is SortOrder.DESC

    asyncio.run(coordinator.update_sort("totalWorkHours"))
    assert coordinator.state.sort_by == "totalWorkHours"
    assert coordinator.state.sort_order is SortOrder.ASC


def test_switching_view_drops_keys_the_view_does_not_understand():
    fetch = RecordingFetch()
    coordinator = QueryCoordinator(fetch, EMPLOYEE_RECORDS)
    asyncio.run(coordinator.update_filter({"status": "Late", "year": 2025, "month": 2}))
    asyncio.run(coordinator.update_filter({"page": 2}))

    records_params = fetch.calls[-1][1]
    assert records_params["type"] == "records"
    assert records_params["status"] == "Late"
    assert records_params["page"] == 2
    assert "year" not in records_params

    asyncio.run(coordinator.switch_view(EMPLOYEE_CALENDAR))

    assert fetch.calls[-1] == ("calendar", {"type": "calendar", "year": 2025, "month": 2})
    assert coordinator.state.page == 2


def test_backend_failures_are_mapped_and_previous_result_kept():
    fetch = RecordingFetch()
    coordinator = QueryCoordinator(fetch, ATTENDANCE)
    asyncio.run(coordinator.refresh())
    previous = coordinator.result

    fetch.error = BackendUnavailable("connection refused")
    asyncio.run(coordinator.update_filter({"status": "Late"}))
    assert isinstance(coordinator.error, NetworkFailure)
    assert coordinator.result is previous

    fetch.error = BackendError("Not authorized to view team attendance", status_code=403)
    asyncio.run(coordinator.refresh())
    assert isinstance(coordinator.error, QueryRejected)
    assert str(coordinator.error) == "Not authorized to view team attendance"

    fetch.error = BackendError(status_code=500)
    asyncio.run(coordinator.refresh())
    assert str(coordinator.error) == "Error fetching attendance"

    coordinator.dismiss_error()
    assert coordinator.error is None

    fetch.error = None
    asyncio.run(coordinator.refresh())
    assert coordinator.error is None
    assert coordinator.result is not previous


def test_clear_filters_returns_to_initial_state():
    fetch = RecordingFetch()
    coordinator = QueryCoordinator(fetch, ATTENDANCE)
    asyncio.run(coordinator.update_filter({"status": "Late", "search": "ann"}))

    asyncio.run(coordinator.clear_filters())

    assert coordinator.state.filters == {}
    assert coordinator.state.search == ""
    assert fetch.calls[-1][1] == {"page": 1, "limit": 30, "sortBy": "date", "sortOrder": "desc"}


class FakeAttendanceLists:
    def __init__(self):
        self.calls = []

    async def list_attendance(self, params):
        self.calls.append(("all", params))
        return "all"

    async def list_my_attendance(self, params):
        self.calls.append(("mine", params))
        return "mine"

    async def list_team_attendance(self, params):
        self.calls.append(("team", params))
        return "team"

    async def get_employee_details(self, employee_id, params):
        self.calls.append(("details", employee_id, params))
        return {"type": params["type"]}


class FakeTaskLists:
    async def list_tasks(self, params):
        return "tasks"

    async def list_my_tasks(self, params):
        return "my tasks"


def test_fetcher_routes_views_to_endpoints():
    attendance = FakeAttendanceLists()
    fetch = build_fetcher(attendance, FakeTaskLists(), employee_id="e1")

    assert asyncio.run(fetch(ATTENDANCE, {})) == "all"
    assert asyncio.run(fetch(EMPLOYEE_CALENDAR, {"type": "calendar"})) == {"type": "calendar"}
    assert asyncio.run(fetch(MY_TASKS, {})) == "my tasks"
    assert attendance.calls[-1] == ("details", "e1", {"type": "calendar"})


def test_details_view_without_employee_is_rejected():
    coordinator = QueryCoordinator(build_fetcher(FakeAttendanceLists()), EMPLOYEE_RECORDS)

    asyncio.run(coordinator.refresh())

    assert isinstance(coordinator.error, QueryRejected)


def test_task_views_need_a_task_repository():
    fetch = build_fetcher(FakeAttendanceLists())
    with pytest.raises(ValidationError):
        asyncio.run(fetch(MY_TASKS, {}))


def test_malformed_backend_row_becomes_a_query_error():
    def handler(request):
        return httpx.Response(
            200,
            json={"attendance": [{"date": "2025-01-06", "status": "Late", "punchIn": {"timestamp": "not-a-date"}}]},
        )

    client = BackendClient(BackendConfig(base_url="http://backend.test"), transport=httpx.MockTransport(handler))
    coordinator = QueryCoordinator(build_fetcher(HttpAttendanceRepository(client)), ATTENDANCE)

    asyncio.run(coordinator.update_filter({"status": "Late"}))

    assert isinstance(coordinator.error, QueryRejected)
    assert "punchIn.timestamp" in str(coordinator.error)
    assert coordinator.loading is False
    assert coordinator.result is None


def test_unexpected_failure_still_clears_loading():
    coordinator = QueryCoordinator(RecordingFetch(error=RuntimeError("boom")), ATTENDANCE)

    with pytest.raises(RuntimeError):
        asyncio.run(coordinator.refresh())

    assert coordinator.loading is False
