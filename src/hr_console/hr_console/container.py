from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from .attendance.http_attendance_repository import HttpAttendanceRepository
from .backend.client import BackendClient, BackendConfig
from .location.geocoder import GoogleReverseGeocoder
from .location.model import PositionOptions
from .location.provider import LocationProvider
from .punch.factory import PunchStrategyFactory
from .punch.workflow import PunchWorkflow
from .tasks.http_task_repository import HttpTaskRepository
from .tasks.service import TaskService


@dataclass(frozen=True)
class Container:
    backend: BackendClient

    attendance_repo: HttpAttendanceRepository
    tasks_repo: HttpTaskRepository

    location_provider: LocationProvider
    punch_workflow: PunchWorkflow
    task_service: TaskService


def build_container(
    *,
    backend_config: dict,
    map_api_key: Optional[str] = None,
    geolocation_timeout: float = 15.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Container:
    config = BackendConfig(
        base_url=str(backend_config["base_url"]),
        api_prefix=str(backend_config.get("api_prefix", "api")),
        token=backend_config.get("token"),
        timeout=float(backend_config.get("timeout", 10.0)),
    )
    backend = BackendClient(config, transport=transport)

    attendance_repo = HttpAttendanceRepository(backend)
    tasks_repo = HttpTaskRepository(backend)

    # The position source is per request (the browser posts its fix), so the
    # shared provider starts without one.
    location_provider = LocationProvider(
        None,
        GoogleReverseGeocoder(map_api_key) if map_api_key else None,
        options=PositionOptions(timeout=float(geolocation_timeout)),
    )
    punch_workflow = PunchWorkflow(
        attendance_repo,
        location_provider,
        strategy_factory=PunchStrategyFactory(),
    )
    task_service = TaskService(tasks_repo)

    return Container(
        backend=backend,
        attendance_repo=attendance_repo,
        tasks_repo=tasks_repo,
        location_provider=location_provider,
        punch_workflow=punch_workflow,
        task_service=task_service,
    )
