from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, TypeVar

from ..core.exceptions import (
    BackendError,
    BackendUnavailable,
    NetworkFailure,
    QueryError,
    QueryRejected,
    ValidationError,
)
from .model import QueryState, QueryView

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[QueryView, dict], Awaitable[T]]


class QueryCoordinator(Generic[T]):
    """Owns one list view's ``QueryState`` and keeps its rendered result current.

    Every state change issues exactly one fetch. Responses are tagged with the
    generation that requested them; anything but the newest is discarded.
    """

    def __init__(self, fetch: Fetcher, view: QueryView, *, initial: Optional[QueryState] = None):
        self._fetch = fetch
        self._view = view
        self._initial = initial or QueryState()
        self._state = self._initial
        self._generation = 0

        self.result: Optional[T] = None
        self.error: Optional[QueryError] = None
        self.loading = False

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def view(self) -> QueryView:
        return self._view

    async def update_filter(self, patch: Mapping[str, Any]) -> QueryState:
        self._state = self._state.merged(patch)
        return await self._run()

    async def update_sort(self, key: str) -> QueryState:
        self._state = self._state.sorted_by(key)
        return await self._run()

    async def switch_view(self, view: QueryView) -> QueryState:
        """Fetch another view with the current shared filters (not a filter change)."""
        self._view = view
        return await self._run()

    async def clear_filters(self) -> QueryState:
        self._state = self._initial
        return await self._run()

    async def refresh(self) -> QueryState:
        return await self._run()

    def dismiss_error(self) -> None:
        self.error = None

    async def _run(self) -> QueryState:
        self._generation += 1
        generation = self._generation
        state, view = self._state, self._view
        params = state.params(view)

        self.loading = True
        error: Optional[QueryError] = None
        result: Optional[T] = None
        try:
            result = await self._fetch(view, params)
        except BackendUnavailable as exc:
            error = NetworkFailure(str(exc))
        except BackendError as exc:
            error = QueryRejected(exc.message or f"Error fetching {view.name}")
        except ValidationError as exc:
            error = QueryRejected(str(exc))
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.debug("Discarding stale %s response (generation %s)", view.name, generation)
            return state

        if error is not None:
            logger.info("Fetching %s failed: %s", view.name, error)
            self.error = error
        else:
            self.result = result
            self.error = None
        return state
