from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Protocol, Set

from loguru import logger

from models import Category, Event, FilterOptions, MarketplaceListing, ProcessedQuery, Recommendation
from services.filters import filter_recommendations
from services.pipeline import SearchPipeline
from services.resolver import PipelineExhausted

ERROR_MESSAGE = "Failed to fetch recommendations. Please try again later."


class SearchStatus(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    RESOLVING = "resolving"
    SETTLED = "settled"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedules on the running event loop; must be used from inside it."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


Listener = Callable[["SearchController"], Any]


class SearchController:
    """Debounced search state machine in front of a SearchPipeline.

    Every resolution cycle takes a new generation number when it starts; a
    cycle whose generation is no longer the latest when it finishes is
    dropped without touching state. Recommendations, events and listings are
    always replaced together.

    Methods that start a cycle spawn tasks on the running loop, so the
    controller is driven from async code (or from scheduler callbacks that
    fire on the loop).
    """

    def __init__(
        self,
        pipeline: SearchPipeline,
        scheduler: Optional[Scheduler] = None,
        *,
        debounce_sec: float = 0.5,
    ) -> None:
        self._pipeline = pipeline
        self._scheduler: Scheduler = scheduler or AsyncioScheduler()
        self.debounce_sec = debounce_sec

        self._query = ""
        self._category = Category.ALL
        self._effective_category = Category.ALL
        self._recommendations: List[Recommendation] = []
        self._events: List[Event] = []
        self._listings: List[MarketplaceListing] = []
        self._loading = False
        self._error: Optional[str] = None
        self._status = SearchStatus.IDLE

        self._generation = 0
        self._timer: Optional[TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[Listener] = []

    # -- read-only state --

    @property
    def query(self) -> str:
        return self._query

    @property
    def category(self) -> Category:
        return self._category

    @property
    def effective_category(self) -> Category:
        return self._effective_category

    @property
    def recommendations(self) -> List[Recommendation]:
        return list(self._recommendations)

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    @property
    def listings(self) -> List[MarketplaceListing]:
        return list(self._listings)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def status(self) -> SearchStatus:
        return self._status

    # -- inputs --

    def set_query(self, text: str) -> None:
        self._query = text or ""
        self._cancel_timer()
        if not self._query.strip():
            self._start_default()
            return
        self._status = SearchStatus.DEBOUNCING
        self._timer = self._scheduler.call_later(self.debounce_sec, self._on_quiet_period)
        self._notify()

    def set_category(self, category: Category | str) -> None:
        self._category = Category.parse(category)
        self.set_query(self._query)

    def add_listener(self, fn: Listener) -> None:
        self._listeners.append(fn)

    async def drain(self) -> None:
        """Wait until no resolution cycle is in flight. A pending debounce timer is not awaited."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @staticmethod
    def filter(items: Iterable[Recommendation], options: Optional[FilterOptions] = None) -> List[Recommendation]:
        return filter_recommendations(items, options or FilterOptions())

    # -- cycles --

    def _on_quiet_period(self) -> None:
        self._timer = None
        self._start_cycle(self._query)

    def _start_cycle(self, text: str) -> None:
        generation = self._next_generation()
        processed = self._pipeline.process(text, self._category)
        self._effective_category = processed.inferred_category
        self._begin_loading()
        self._spawn(self._run_query(generation, processed))

    def _start_default(self) -> None:
        generation = self._next_generation()
        self._begin_loading()
        self._spawn(self._run_default(generation))

    async def _run_query(self, generation: int, processed: ProcessedQuery) -> None:
        try:
            outcome = await self._pipeline.resolve(processed)
        except PipelineExhausted as exc:
            logger.warning("search for {!r} failed: {}", processed.processed_query, exc)
            self._settle_error(generation)
            return
        except Exception:
            logger.exception("search for {!r} failed", processed.processed_query)
            self._settle_error(generation)
            return
        self._settle(generation, outcome.recommendations, outcome.events, outcome.listings)

    async def _run_default(self, generation: int) -> None:
        try:
            items = await self._pipeline.default_results()
        except Exception:
            logger.exception("default results failed")
            self._settle_error(generation)
            return
        self._settle(generation, items, [], [])

    def _settle(
        self,
        generation: int,
        recommendations: List[Recommendation],
        events: List[Event],
        listings: List[MarketplaceListing],
    ) -> None:
        if generation != self._generation:
            logger.debug("discarding stale results for generation {} (latest {})", generation, self._generation)
            return
        self._recommendations = list(recommendations)
        self._events = list(events)
        self._listings = list(listings)
        self._error = None
        self._finish()

    def _settle_error(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("discarding stale failure for generation {}", generation)
            return
        self._recommendations = []
        self._events = []
        self._listings = []
        self._error = ERROR_MESSAGE
        self._finish()

    def _finish(self) -> None:
        self._loading = False
        # a newer keystroke may already be waiting out its quiet period
        self._status = SearchStatus.DEBOUNCING if self._timer is not None else SearchStatus.SETTLED
        self._notify()

    def _begin_loading(self) -> None:
        self._loading = True
        self._error = None
        self._status = SearchStatus.RESOLVING
        self._notify()

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _notify(self) -> None:
        for fn in list(self._listeners):
            try:
                fn(self)
            except Exception:
                logger.exception("search listener failed")
