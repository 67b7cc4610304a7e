from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.model import AttendanceDay
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import ActingAs, PunchAction, PunchState
from ..core.exceptions import (
    AlreadyPunched,
    BackendError,
    LocationUnsupported,
    NotYetPunchedIn,
    PunchRejected,
    ValidationError,
)
from ..location.model import LocationReading
from ..location.provider import LocationProvider
from .factory import PunchStrategyFactory
from .model import PendingPunch, Subject

logger = logging.getLogger(__name__)

_GENERIC_FAILURE = {
    PunchAction.IN: "Punch in failed",
    PunchAction.OUT: "Punch out failed",
}


class PunchWorkflow:
    """Punch-in/punch-out state machine, one slot per subject per calendar day.

    ``NoPunch --in--> PunchedIn --out--> PunchedOut``. Invalid invocations are
    rejected before any network call. The cached ``AttendanceDay`` is only
    ever replaced by what the backend returns.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        location: Optional[LocationProvider] = None,
        *,
        strategy_factory: Optional[PunchStrategyFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._location = location
        self._factory = strategy_factory or PunchStrategyFactory()
        self._clock = clock

        self._days: dict[str, tuple[date, Optional[AttendanceDay]]] = {}
        self._readings: dict[str, LocationReading] = {}
        self._in_flight: set[str] = set()
        self._pending: dict[str, PendingPunch] = {}
        # Flask serves requests on several threads; guards the in-flight claim.
        self._lock = threading.Lock()

    def pending(self, subject: Subject) -> Optional[PendingPunch]:
        return self._pending.get(subject.employee_id)

    def today_attendance(self, subject: Subject) -> Optional[AttendanceDay]:
        slot = self._days.get(subject.employee_id)
        if not slot or slot[0] != self._clock().date():
            return None
        return slot[1]

    def last_location(self, subject: Subject) -> Optional[LocationReading]:
        return self._readings.get(subject.employee_id)

    def state_of(self, subject: Subject) -> PunchState:
        day = self.today_attendance(subject)
        if day is None or day.punch_in is None:
            return PunchState.NO_PUNCH
        if day.punch_out is None:
            return PunchState.PUNCHED_IN
        return PunchState.PUNCHED_OUT

    def is_busy(self, subject: Subject) -> bool:
        return subject.employee_id in self._in_flight

    def available_actions(self, subject: Subject) -> frozenset[PunchAction]:
        """Actions the UI may enable right now."""
        if self.is_busy(subject):
            return frozenset()
        state = self.state_of(subject)
        if state is PunchState.NO_PUNCH:
            return frozenset({PunchAction.IN})
        if state is PunchState.PUNCHED_IN:
            return frozenset({PunchAction.OUT})
        return frozenset()

    async def load_today(self, subject: Subject) -> Optional[AttendanceDay]:
        if subject.is_self:
            day = await self._attendance.get_today()
        else:
            day = await self._attendance.get_today_for_employee(subject.employee_id)
        self._days[subject.employee_id] = (self._clock().date(), day)
        return day

    async def refresh_location(self, subject: Subject, *, location: Optional[LocationProvider] = None) -> LocationReading:
        """Capture a fix for display ahead of a self punch."""
        provider = location or self._location
        if provider is None:
            raise LocationUnsupported()
        reading = await provider.capture_location()
        self._readings[subject.employee_id] = reading
        return reading

    def request_confirmation(
        self,
        action: PunchAction,
        subject: Subject,
        *,
        manual_time: Optional[datetime] = None,
    ) -> PendingPunch:
        pending = PendingPunch(
            action=PunchAction(action),
            subject=subject,
            target_time=manual_time or self._clock(),
            location=self._readings.get(subject.employee_id),
        )
        self._pending[subject.employee_id] = pending
        return pending

    def cancel_confirmation(self, subject: Subject) -> None:
        self._pending.pop(subject.employee_id, None)

    async def submit_punch(
        self,
        action: PunchAction,
        subject: Subject,
        acting_as: ActingAs,
        manual_time: Optional[datetime] = None,
        *,
        location: Optional[LocationProvider] = None,
    ) -> AttendanceDay:
        action = PunchAction(action)
        acting_as = ActingAs(acting_as)
        key = subject.employee_id

        strategy = self._factory.for_acting(acting_as)
        if manual_time is not None and not strategy.accepts_manual_time:
            raise ValidationError("Manual time is only allowed when punching on behalf of an employee")

        with self._lock:
            if key in self._in_flight:
                raise AlreadyPunched("A punch is already being submitted for this employee")
            self._ensure_transition(action, self.state_of(subject))
            self._in_flight.add(key)

        try:
            reading = await strategy.capture(location or self._location)
            if reading is not None:
                self._readings[key] = reading
            try:
                day = await strategy.submit(
                    self._attendance,
                    action=action,
                    subject=subject,
                    reading=reading,
                    manual_time=manual_time,
                )
            except BackendError as exc:
                logger.info("Punch %s rejected for %s: %s", action.value, key, exc)
                raise PunchRejected(exc.message or _GENERIC_FAILURE[action]) from exc
            self._days[key] = (self._clock().date(), day)
        finally:
            with self._lock:
                self._in_flight.discard(key)

        self._pending.pop(key, None)
        logger.info("Punch %s accepted for %s (%s)", action.value, key, acting_as.value)
        return day

    @staticmethod
    def _ensure_transition(action: PunchAction, state: PunchState) -> None:
        if action is PunchAction.IN:
            if state is PunchState.PUNCHED_IN:
                raise AlreadyPunched("Already punched in today")
            if state is PunchState.PUNCHED_OUT:
                raise AlreadyPunched("Already punched out today")
            return

        if state is PunchState.NO_PUNCH:
            raise NotYetPunchedIn("You have not punched in today")
        if state is PunchState.PUNCHED_OUT:
            raise AlreadyPunched("Already punched out today")
