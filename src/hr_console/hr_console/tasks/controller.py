from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import flag, json_errors
from ..container import Container
from ..core.constants import DEFAULT_TASK_PAGE_LIMIT
from ..queries.coordinator import QueryCoordinator
from ..queries.fetchers import build_fetcher
from ..queries.model import MY_TASKS, TASKS, QueryState, state_from_args
from ..queries.pagination import page_numbers
from .presenter import to_rows

_TASK_QUERY = QueryState(limit=DEFAULT_TASK_PAGE_LIMIT, sort_by="deadline")


def register(app: Flask, container: Container) -> None:
    fetch = build_fetcher(container.attendance_repo, container.tasks_repo)

    @app.route("/console/tasks", methods=["GET"], endpoint="tasks_list")
    @json_errors
    async def tasks_list():
        args = request.args.to_dict()
        view = MY_TASKS if flag(args.pop("mine", None)) else TASKS

        coordinator = QueryCoordinator(fetch, view, initial=state_from_args(args, _TASK_QUERY))
        await coordinator.refresh()
        if coordinator.error is not None:
            raise coordinator.error

        page = coordinator.result
        return jsonify(
            {
                "success": True,
                "rows": to_rows(page.items),
                "pagination": {
                    "page": page.pagination.page,
                    "total_pages": page.pagination.total_pages,
                    "total": page.pagination.total,
                    "pages": page_numbers(page.pagination.page, page.pagination.total_pages),
                },
            }
        )

    @app.route("/console/tasks/<task_id>/status", methods=["PUT"], endpoint="tasks_update_status")
    @json_errors
    async def tasks_update_status(task_id: str):
        payload = request.get_json(silent=True) or {}
        task = await container.task_service.update_status(
            task_id, str(payload.get("status") or ""), remarks=str(payload.get("remarks") or "")
        )
        return jsonify({"success": True, "task": to_rows([task])[0] if task else None})

    @app.route("/console/tasks/<task_id>/review", methods=["PUT"], endpoint="tasks_review")
    @json_errors
    async def tasks_review(task_id: str):
        payload = request.get_json(silent=True) or {}
        task = await container.task_service.review(
            task_id, str(payload.get("status") or ""), remarks=str(payload.get("remarks") or "")
        )
        return jsonify({"success": True, "task": to_rows([task])[0] if task else None})
