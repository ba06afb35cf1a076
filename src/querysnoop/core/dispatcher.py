# src/querysnoop/core/dispatcher.py
from __future__ import annotations
from typing import List, Optional, Tuple

from querysnoop.core import log
from querysnoop.core.contracts import Query, QueryFilter, QueryObserver, Registration
from querysnoop.core.errors import InvalidArgument, RegistryLocked
from querysnoop.core.metrics import gauge_set, inc


class QueryDispatcher:
    """Ordered, append-only list of (filter, observer) pairs.

    ``dispatch(query)`` walks the pairs in registration order and calls each
    observer whose filter accepts the query. Registration is refused while
    a dispatch is running or while the dispatcher is frozen.
    """

    def __init__(self, name: str = "querysnoop.dispatcher"):
        self.name = name
        self.l = log.get(self.name)
        self._regs: List[Registration] = []
        self._frozen = False
        self._depth = 0  # nested dispatch calls

    def register(self, query_filter: QueryFilter, observer: QueryObserver, *, name: Optional[str] = None) -> Registration:
        if not callable(query_filter):
            raise InvalidArgument(f"query_filter must be callable, got {type(query_filter).__name__}")
        if not callable(observer):
            raise InvalidArgument(f"observer must be callable, got {type(observer).__name__}")
        if self._frozen or self._depth:
            raise RegistryLocked("cannot register observers while a run is in progress")

        reg = Registration(query_filter, observer, name or getattr(observer, "__name__", "anon"))
        self._regs.append(reg)
        self.l.debug("registered #%d observer=%s", len(self._regs), reg.name)
        gauge_set("dispatcher_registrations", float(len(self._regs)), dispatcher=self.name)
        return reg

    def dispatch(self, query: Query) -> int:
        """Notify every matching observer; returns how many fired."""
        inc("dispatch_total", 1, dispatcher=self.name)
        fired = 0
        self._depth += 1
        try:
            for reg in self._regs:
                if reg.matches(query):
                    reg.notify(query)
                    fired += 1
                    inc("notify_total", 1, observer=reg.name)
        finally:
            self._depth -= 1
        return fired

    def freeze(self) -> None:
        self._frozen = True

    def thaw(self) -> None:
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def registrations(self) -> Tuple[Registration, ...]:
        return tuple(self._regs)

    def __len__(self) -> int:
        return len(self._regs)
