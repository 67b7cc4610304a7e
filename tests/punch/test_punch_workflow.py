import asyncio
import threading
from datetime import date, datetime

import pytest

from src.hr_console.hr_console.attendance.model import AttendanceDay, PunchEvent
from src.hr_console.hr_console.core.enums import ActingAs, AttendanceStatus, PunchAction, PunchState
from src.hr_console.hr_console.core.exceptions import (
    AlreadyPunched,
    BackendError,
    LocationRequired,
    LocationUnsupported,
    NotYetPunchedIn,
    PermissionDenied,
    PunchRejected,
    ValidationError,
)
from src.hr_console.hr_console.location.provider import LocationProvider
from src.hr_console.hr_console.location.source import SubmittedPositionSource
from src.hr_console.hr_console.punch.model import Subject
from src.hr_console.hr_console.punch.workflow import PunchWorkflow

NOW = datetime(2025, 1, 6, 9, 0, 0)
FIX = {"latitude": 10.776889, "longitude": 106.700806, "accuracy": 8.0}
ME = Subject(employee_id="me", is_self=True)
EMPLOYEE = Subject(employee_id="e42", is_self=False, display_name="Someone")


class FakeAttendance:
    def __init__(self, today=None, error=None):
        self.today = today
        self.error = error
        self.gate = None
        self.punches = []
        self.reads = []

    async def _punch(self, name, employee_id, **kwargs):
        self.punches.append((name, employee_id, kwargs))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        punch = PunchEvent(timestamp=kwargs.get("punch_time") or NOW)
        if name.startswith("punch_in"):
            return AttendanceDay(NOW.date(), employee_id, AttendanceStatus.PRESENT, punch_in=punch)
        return AttendanceDay(
            NOW.date(),
            employee_id,
            AttendanceStatus.PRESENT,
            punch_in=PunchEvent(timestamp=NOW),
            punch_out=punch,
            total_work_hours=8.0,
        )

    async def punch_in(self, *, coordinates):
        return await self._punch("punch_in", "me", coordinates=coordinates)

    async def punch_out(self, *, coordinates):
        return await self._punch("punch_out", "me", coordinates=coordinates)

    async def punch_in_by_hr(self, employee_id, *, punch_time=None):
        return await self._punch("punch_in_by_hr", employee_id, punch_time=punch_time)

    async def punch_out_by_hr(self, employee_id, *, punch_time=None):
        return await self._punch("punch_out_by_hr", employee_id, punch_time=punch_time)

    async def get_today(self):
        self.reads.append("me")
        return self.today

    async def get_today_for_employee(self, employee_id):
        self.reads.append(employee_id)
        return self.today


def _punched_in():
    return AttendanceDay(NOW.date(), "me", AttendanceStatus.PRESENT, punch_in=PunchEvent(timestamp=NOW))


def _workflow(repo, fix=FIX, clock=lambda: NOW):
    source = SubmittedPositionSource(fix) if fix else None
    return PunchWorkflow(repo, LocationProvider(source), clock=clock)


def test_fresh_day_allows_only_punch_in():
    repo = FakeAttendance()
    workflow = _workflow(repo)
    asyncio.run(workflow.load_today(ME))

    assert workflow.state_of(ME) is PunchState.NO_PUNCH
    assert workflow.available_actions(ME) == {PunchAction.IN}


def test_punch_out_without_punch_in_makes_no_call():
    repo = FakeAttendance()
    workflow = _workflow(repo)
    asyncio.run(workflow.load_today(ME))

    with pytest.raises(NotYetPunchedIn):
        asyncio.run(workflow.submit_punch(PunchAction.OUT, ME, ActingAs.SELF))

    assert repo.punches == []
    assert workflow.state_of(ME) is PunchState.NO_PUNCH


def test_self_punch_in_sends_captured_coordinates():
    repo = FakeAttendance()
    workflow = _workflow(repo)

    day = asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))

    name, _, kwargs = repo.punches[0]
    assert name == "punch_in"
    assert kwargs["coordinates"].latitude == 10.776889
    assert workflow.today_attendance(ME) is day
    assert workflow.state_of(ME) is PunchState.PUNCHED_IN
    assert workflow.available_actions(ME) == {PunchAction.OUT}
    assert workflow.last_location(ME).address == "10.776889, 106.700806"


def test_full_day_cycle_ends_with_no_actions():
    repo = FakeAttendance()
    workflow = _workflow(repo)

    asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))
    asyncio.run(workflow.submit_punch(PunchAction.OUT, ME, ActingAs.SELF))

    assert workflow.state_of(ME) is PunchState.PUNCHED_OUT
    assert workflow.available_actions(ME) == frozenset()
    with pytest.raises(AlreadyPunched, match="Already punched out today"):
        asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))
    assert [p[0] for p in repo.punches] == ["punch_in", "punch_out"]


def test_second_punch_in_is_rejected_locally():
    repo = FakeAttendance(today=_punched_in())
    workflow = _workflow(repo)
    asyncio.run(workflow.load_today(ME))

    with pytest.raises(AlreadyPunched, match="Already punched in today"):
        asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))
    assert repo.punches == []


def test_rapid_double_punch_in_accepts_exactly_one():
    repo = FakeAttendance()
    workflow = _workflow(repo)

    async def scenario():
        repo.gate = asyncio.Event()

        async def release():
            await asyncio.sleep(0.01)
            repo.gate.set()

        return await asyncio.gather(
            workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF),
            workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF),
            release(),
            return_exceptions=True,
        )

    first, second, _ = asyncio.run(scenario())

    assert isinstance(first, AttendanceDay)
    assert isinstance(second, AlreadyPunched)
    assert len(repo.punches) == 1
    assert workflow.state_of(ME) is PunchState.PUNCHED_IN
    assert not workflow.is_busy(ME)


def test_location_failure_aborts_self_punch():
    repo = FakeAttendance()
    workflow = _workflow(repo, fix={"error": {"code": 1, "message": "User denied Geolocation"}})

    with pytest.raises(LocationRequired) as excinfo:
        asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))

    assert isinstance(excinfo.value.location_error, PermissionDenied)
    assert str(excinfo.value) == "Location Error: Location access denied"
    assert repo.punches == []
    assert workflow.state_of(ME) is PunchState.NO_PUNCH


def test_missing_geolocation_is_unsupported():
    repo = FakeAttendance()
    workflow = _workflow(repo, fix=None)

    with pytest.raises(LocationRequired) as excinfo:
        asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))

    assert isinstance(excinfo.value.location_error, LocationUnsupported)
    assert repo.punches == []


def test_backend_message_is_shown_verbatim():
    repo = FakeAttendance(error=BackendError("You are outside the office radius", status_code=400))
    workflow = _workflow(repo)

    with pytest.raises(PunchRejected) as excinfo:
        asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))

    assert excinfo.value.message == "You are outside the office radius"
    assert workflow.state_of(ME) is PunchState.NO_PUNCH
    assert not workflow.is_busy(ME)


def test_backend_failure_without_message_is_generic():
    repo = FakeAttendance(error=BackendError(status_code=500))
    workflow = _workflow(repo)

    with pytest.raises(PunchRejected, match="Punch in failed"):
        asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))


def test_manager_punch_uses_manual_time_and_skips_location():
    repo = FakeAttendance()
    # A location source that would fail proves the manager path never asks for a fix.
    workflow = _workflow(repo, fix={"error": {"code": 1}})
    manual = datetime(2025, 1, 6, 8, 30)

    day = asyncio.run(workflow.submit_punch(PunchAction.IN, EMPLOYEE, ActingAs.MANAGER_ON_BEHALF, manual))

    assert repo.punches == [("punch_in_by_hr", "e42", {"punch_time": manual})]
    assert day.punch_in.timestamp == manual
    assert workflow.state_of(EMPLOYEE) is PunchState.PUNCHED_IN
    assert workflow.state_of(ME) is PunchState.NO_PUNCH


def test_manual_time_is_not_allowed_for_self_punch():
    repo = FakeAttendance()
    workflow = _workflow(repo)

    with pytest.raises(ValidationError):
        asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF, datetime(2025, 1, 6, 7, 0)))
    assert repo.punches == []


def test_confirmation_does_not_change_state():
    repo = FakeAttendance()
    workflow = _workflow(repo)
    asyncio.run(workflow.refresh_location(ME))

    pending = workflow.request_confirmation(PunchAction.IN, ME)

    assert pending.target_time == NOW
    assert pending.location_label == "10.776889, 106.700806"
    assert workflow.state_of(ME) is PunchState.NO_PUNCH
    assert repo.punches == []

    workflow.cancel_confirmation(ME)
    assert workflow.pending(ME) is None


def test_successful_punch_clears_pending_confirmation():
    repo = FakeAttendance()
    workflow = _workflow(repo)
    workflow.request_confirmation(PunchAction.IN, ME)

    asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))

    assert workflow.pending(ME) is None


def test_confirmations_are_kept_per_employee():
    repo = FakeAttendance()
    workflow = _workflow(repo)
    mine = workflow.request_confirmation(PunchAction.IN, ME)
    theirs = workflow.request_confirmation(PunchAction.IN, EMPLOYEE, manual_time=datetime(2025, 1, 6, 8, 0))

    assert workflow.pending(ME) is mine
    assert workflow.pending(EMPLOYEE) is theirs

    asyncio.run(workflow.submit_punch(PunchAction.IN, EMPLOYEE, ActingAs.MANAGER_ON_BEHALF))

    assert workflow.pending(EMPLOYEE) is None
    assert workflow.pending(ME) is mine

    workflow.cancel_confirmation(EMPLOYEE)
    assert workflow.pending(ME) is mine


class BlockingAttendance(FakeAttendance):
    """Parks the backend call on a thread event so another thread can race it."""

    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    async def punch_in(self, *, coordinates):
        self.punches.append(("punch_in", "me", {"coordinates": coordinates}))
        self.entered.set()
        await asyncio.to_thread(self.release.wait, 5)
        return _punched_in()


def test_punch_from_another_thread_is_rejected_while_one_is_in_flight():
    repo = BlockingAttendance()
    workflow = _workflow(repo)
    results = []

    def first_request():
        results.append(asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF)))

    worker = threading.Thread(target=first_request)
    worker.start()
    assert repo.entered.wait(5)

    with pytest.raises(AlreadyPunched):
        asyncio.run(workflow.submit_punch(PunchAction.IN, ME, ActingAs.SELF))

    repo.release.set()
    worker.join(5)

    assert len(repo.punches) == 1
    assert isinstance(results[0], AttendanceDay)
    assert workflow.state_of(ME) is PunchState.PUNCHED_IN
    assert not workflow.is_busy(ME)


def test_state_resets_on_a_new_day():
    now = {"value": NOW}
    repo = FakeAttendance(today=_punched_in())
    workflow = _workflow(repo, clock=lambda: now["value"])
    asyncio.run(workflow.load_today(ME))
    assert workflow.state_of(ME) is PunchState.PUNCHED_IN

    now["value"] = datetime(2025, 1, 7, 0, 5)

    assert workflow.today_attendance(ME) is None
    assert workflow.state_of(ME) is PunchState.NO_PUNCH


def test_load_today_for_another_employee():
    repo = FakeAttendance()
    workflow = _workflow(repo)

    asyncio.run(workflow.load_today(EMPLOYEE))
    asyncio.run(workflow.load_today(ME))

    assert repo.reads == ["e42", "me"]
