from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

__all__ = [
    "Query",
    "QueryFilter",
    "QueryObserver",
    "Registration",
    "RunState",
    "RunResult",
]


# --------- Primitive / aliases ---------
Query = str
QueryFilter = Callable[[Query], bool]
QueryObserver = Callable[[Query], None]


@dataclass(frozen=True, slots=True)
class Registration:
    """A (filter, observer) pair; the observer fires when the filter accepts."""
    query_filter: QueryFilter
    observer: QueryObserver
    name: str = ""

    def matches(self, query: Query) -> bool:
        return bool(self.query_filter(query))

    def notify(self, query: Query) -> None:
        self.observer(query)


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class RunResult:
    """Outcome of one simulator run."""
    state: RunState = RunState.IDLE
    queries: int = 0                          # lines handed to the dispatcher
    notifications: int = 0                    # observer invocations
    error: Optional[BaseException] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.state is RunState.COMPLETED

    def to_dict(self):
        return {
            "state": self.state.value,
            "queries": self.queries,
            "notifications": self.notifications,
            "error": None if self.error is None else f"{type(self.error).__name__}: {self.error}",
        }
