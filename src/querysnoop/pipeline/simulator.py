# src/querysnoop/pipeline/simulator.py
from __future__ import annotations
import time
from typing import Optional

from querysnoop.adapters.line_source import Source, read_and_process_queries
from querysnoop.core.contracts import Query, QueryFilter, QueryObserver, Registration, RunResult, RunState
from querysnoop.core.dispatcher import QueryDispatcher
from querysnoop.core.errors import QuerySourceError
from querysnoop.core.log import get as get_logger
from querysnoop.core.metrics import inc, observe_hist

log = get_logger(__name__)


class WebSearchModel:
    """Pretends to run web searches by replaying queries from a file.

    Each line of ``source`` is handed to the dispatcher, which notifies the
    observers whose filters accept it.

    I/O errors end the run in ``RunState.FAILED``. By default they are logged
    and returned in the ``RunResult`` instead of raised, so a broken query file
    never takes the caller down; pass ``raise_errors=True`` to get the
    exception after the state has been recorded. Errors raised by observers or
    filters always propagate.
    """

    def __init__(
        self,
        source: Source,
        *,
        dispatcher: Optional[QueryDispatcher] = None,
        raise_errors: bool = False,
        encoding: Optional[str] = None,
    ):
        self.source = source
        self.dispatcher = dispatcher if dispatcher is not None else QueryDispatcher()
        self.raise_errors = raise_errors
        self.encoding = encoding
        self._state = RunState.IDLE
        self.last_result: Optional[RunResult] = None

    @property
    def state(self) -> RunState:
        return self._state

    def add_query_observer(self, observer: QueryObserver, query_filter: QueryFilter, *, name: Optional[str] = None) -> Registration:
        return self.dispatcher.register(query_filter, observer, name=name)

    def pretend_to_search(self) -> RunResult:
        if self._state is RunState.RUNNING:
            raise RuntimeError("search already running")

        result = RunResult(state=RunState.RUNNING)
        self._state = RunState.RUNNING
        self.last_result = result
        froze = not self.dispatcher.frozen
        if froze:
            self.dispatcher.freeze()
        log.info("search start source=%s observers=%d", self.source, len(self.dispatcher))

        def process_query(query: Query) -> None:
            result.notifications += self.dispatcher.dispatch(query)
            result.queries += 1

        t0 = time.perf_counter()
        try:
            read_and_process_queries(self.source, process_query, encoding=self.encoding)
        except QuerySourceError as e:
            self._finish(result, RunState.FAILED, e)
            log.error("search failed after %d queries: %s", result.queries, e, exc_info=True)
            if self.raise_errors:
                raise
            return result
        except BaseException as e:
            self._finish(result, RunState.FAILED, e)
            raise
        else:
            self._finish(result, RunState.COMPLETED, None)
            log.info("search done queries=%d notifications=%d", result.queries, result.notifications)
            return result
        finally:
            if froze:
                self.dispatcher.thaw()
            observe_hist("run_ms", (time.perf_counter() - t0) * 1000.0)

    run = pretend_to_search

    def _finish(self, result: RunResult, state: RunState, error: Optional[BaseException]) -> None:
        result.state = state
        result.error = error
        self._state = state
        inc("runs_total", 1, state=state.value)
