"""
Query and pagination state machine.

Owns the row data set, the pagination window, the loading flag and the
request counter, and turns mount, refresh and table-interaction events into
calls to the host-supplied query coroutine.

Concurrency model: every state change happens on the GUI thread. The only
suspension point is the await on the host query, which runs either on the
asyncio loop running in the GUI thread (or an injected ``spawn``) or, in a
plain Qt application, on a BackgroundTask worker whose outcome is delivered
back by queued signals. No abort signal is passed to the host; only the
application of its result is guarded:

- after unmount, results are discarded silently;
- with QueryOrdering.LAST_ISSUED, results of superseded requests are dropped;
  with QueryOrdering.LAST_RESOLVED, whatever resolves last is applied.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_editgrid.config import EditGridConfig, QueryOrdering, get_grid_config
from pyqt_editgrid.core import BackgroundTask, DeferredCall
from pyqt_editgrid.core.background_task import CLEANUP_WAIT_MS
from pyqt_editgrid.types import (
    Pagination, QueryArgs, QueryRequest, QueryResult, Row, TableChanges
)

logger = logging.getLogger(__name__)

QueryFunction = Callable[[QueryRequest], Awaitable[Union[QueryResult, Mapping[str, Any], None]]]
PaginationOption = Union[Pagination, Mapping[str, Any], bool, None]

# Default payload of refresh(): reuse the cached payload. Pass None to clear it.
REUSE_PAYLOAD = object()


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class QueryController(QObject):
    """
    Issues queries and reconciles their results into the row data set.

    Usage:
        controller = QueryController(query=fetch_users)
        controller.data_changed.connect(table.render_rows)
        controller.mount()        # first query fires after a short delay
        controller.schedule(controller.refresh_args(payload={"name": "a"}))
        controller.unmount()
    """

    data_changed = pyqtSignal(list)
    pagination_changed = pyqtSignal(object)  # Optional[Pagination]
    loading_changed = pyqtSignal(bool)
    query_failed = pyqtSignal(Exception)

    def __init__(
        self,
        query: Optional[QueryFunction] = None,
        data: Optional[List[Row]] = None,
        pagination: PaginationOption = None,
        config: Optional[EditGridConfig] = None,
        spawn: Optional[Callable[[Awaitable], Any]] = None,
        parent=None
    ):
        """
        Args:
            query: Host coroutine function returning a page, or None to abort
            data: Initial rows
            pagination: False disables paging; otherwise overrides of the
                default window (current=1, page_size from config)
            config: Grid configuration (defaults to the global one)
            spawn: Schedules a fetch coroutine. By default the asyncio loop
                running in this thread, or a worker thread when none runs
            parent: Qt parent
        """
        super().__init__(parent)
        self._config = config or get_grid_config()
        self._query = query
        self._data: List[Row] = list(data or [])
        if pagination is False:
            self._pagination: Optional[Pagination] = None
        else:
            window = Pagination(current=1, page_size=self._config.default_page_size)
            overrides = None if isinstance(pagination, bool) else Pagination.coerce(pagination)
            self._pagination = window.merged(overrides)
        self._spawn = spawn

        self._loading = False
        self._request_count = 0
        self._last_args: Optional[QueryArgs] = None
        self._mounted = False
        self._torn_down = False
        self._workers: List[BackgroundTask] = []
        self._initial_query = DeferredCall(
            delay_ms=self._config.initial_query_delay_ms,
            handler=self.schedule,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def data(self) -> List[Row]:
        return self._data

    @property
    def pagination(self) -> Optional[Pagination]:
        return self._pagination

    @property
    def pagination_enabled(self) -> bool:
        return self._pagination is not None

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def request_count(self) -> int:
        return self._request_count

    @property
    def last_args(self) -> Optional[QueryArgs]:
        return self._last_args

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    @property
    def initial_query_pending(self) -> bool:
        return self._initial_query.pending

    def set_data(self, rows: List[Row]) -> None:
        """Replace the row data set (externally supplied rows or a re-render)."""
        self._data = list(rows)
        self.data_changed.emit(self._data)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Mark mounted and schedule the initial query."""
        self._mounted = True
        self._torn_down = False
        self._initial_query.schedule()
        logger.debug(f"Mounted; initial query in {self._config.initial_query_delay_ms}ms")

    def unmount(self) -> None:
        """Tear down: cancel the initial query and ignore in-flight results."""
        self._initial_query.cancel()
        self._request_count = 0
        self._mounted = False
        self._torn_down = True
        if self._workers:
            for worker in self._workers:
                worker.cancel()
                worker.wait(CLEANUP_WAIT_MS)
            # Cancelled workers never report back
            self._loading = False
        logger.debug("Unmounted; in-flight results will be discarded")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def schedule(self, args: Optional[QueryArgs] = None) -> Any:
        """
        Start ``fetch(args)`` without awaiting it.

        Returns the asyncio task (or whatever ``spawn`` returns), or the
        BackgroundTask worker when no asyncio loop runs in this thread.
        """
        if self._spawn is None and not _loop_running():
            return self._fetch_in_worker(args or QueryArgs())

        spawn = self._spawn or asyncio.ensure_future
        task = spawn(self.fetch(args))
        if isinstance(task, asyncio.Future):
            task.add_done_callback(self._log_failure)
        return task

    async def fetch(self, args: Optional[QueryArgs] = None) -> bool:
        """
        Issue one logical query.

        Returns True when a result was applied to the data set.
        """
        if self._query is None:
            return False
        request = self._issue(args or QueryArgs())

        with self._loading_scope():
            try:
                raw = await self._query(request)
            except Exception as e:
                self._report_failure(e)
                raise

        return self._apply(raw, request.count)

    def refresh_args(self, pagination: Union[Pagination, Mapping[str, Any], None] = None,
                     payload: Any = REUSE_PAYLOAD, changes: Optional[TableChanges] = None) -> QueryArgs:
        """
        Arguments for a re-query from the first page.

        Keeps the last-used page size and payload unless overridden; an
        explicit ``payload=None`` drops the cached payload.
        """
        overrides = Pagination.coerce(pagination)
        last = self._last_args

        if self._pagination is not None:
            page_size = self._pagination.page_size
            if last is not None and last.pagination is not None and last.pagination.page_size is not None:
                page_size = last.pagination.page_size
            resolved = Pagination(current=1, page_size=page_size).merged(overrides)
        else:
            resolved = overrides

        if payload is REUSE_PAYLOAD:
            payload = last.payload if last is not None else None

        return QueryArgs(pagination=resolved, payload=payload, changes=changes)

    async def refresh(self, pagination: Union[Pagination, Mapping[str, Any], None] = None,
                      payload: Any = REUSE_PAYLOAD, changes: Optional[TableChanges] = None) -> bool:
        """Re-query from the first page; see refresh_args()."""
        return await self.fetch(self.refresh_args(pagination, payload, changes))

    def table_change_args(self, pagination: Optional[Pagination],
                          filters: Optional[Mapping[str, Any]] = None,
                          sorter: Optional[Mapping[str, Any]] = None,
                          extra: Optional[Mapping[str, Any]] = None) -> QueryArgs:
        """Arguments for a paging/sorting/filtering interaction, reusing the cached payload."""
        changes = TableChanges(
            pagination=pagination,
            filters=filters or {},
            sorter=sorter or {},
            extra=extra or {},
        )
        payload = self._last_args.payload if self._last_args is not None else None
        window = None
        if pagination is not None:
            window = Pagination(current=pagination.current, page_size=pagination.page_size,
                                total=pagination.total)
        return QueryArgs(pagination=window, payload=payload, changes=changes)

    async def on_table_change(self, pagination: Optional[Pagination],
                              filters: Optional[Mapping[str, Any]] = None,
                              sorter: Optional[Mapping[str, Any]] = None,
                              extra: Optional[Mapping[str, Any]] = None) -> bool:
        """Query for a table interaction; see table_change_args()."""
        return await self.fetch(self.table_change_args(pagination, filters, sorter, extra))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _issue(self, args: QueryArgs) -> QueryRequest:
        """Number the request and cache its args."""
        self._request_count += 1
        count = self._request_count
        self._last_args = args

        pagination = args.pagination if args.pagination is not None else self._pagination
        if pagination is not None:
            pagination = pagination.without_total()

        logger.debug(f"Query #{count}: pagination={pagination}")
        return QueryRequest(
            count=count,
            pagination=pagination,
            payload=args.payload,
            changes=args.changes,
        )

    def _fetch_in_worker(self, args: QueryArgs) -> Optional[BackgroundTask]:
        if self._query is None:
            return None
        request = self._issue(args)
        worker = BackgroundTask(target=self._query, args=(request,))

        def on_result(raw):
            if worker.cancelled:
                return
            self._set_loading(False)
            self._apply(raw, request.count)

        def on_error(error: Exception):
            if worker.cancelled:
                return
            self._set_loading(False)
            self._report_failure(error)
            logger.error(f"Query #{request.count} failed", exc_info=error)

        def on_finished():
            if worker in self._workers:
                self._workers.remove(worker)
            worker.deleteLater()

        worker.result_ready.connect(on_result)
        worker.error_occurred.connect(on_error)
        worker.finished.connect(on_finished)

        self._workers.append(worker)
        self._set_loading(True)
        worker.start()
        return worker

    def _apply(self, raw: Union[QueryResult, Mapping[str, Any], None], count: int) -> bool:
        if raw is None:
            logger.debug(f"Query #{count} aborted by host")
            return False
        if self._torn_down:
            logger.debug(f"Query #{count} resolved after unmount; discarded")
            return False
        if self._config.query_ordering is QueryOrdering.LAST_ISSUED and count != self._request_count:
            logger.debug(f"Query #{count} superseded by #{self._request_count}; discarded")
            return False

        result = QueryResult.coerce(raw)
        self._data = list(result.data)
        self.data_changed.emit(self._data)

        if self._pagination is not None:
            self._pagination = self._pagination.merged(result.pagination)
            self.pagination_changed.emit(self._pagination)

        logger.debug(f"Query #{count} applied: {len(self._data)} row(s), pagination={self._pagination}")
        return True

    def _report_failure(self, error: Exception) -> None:
        if not self._torn_down:
            self.query_failed.emit(error)

    @contextmanager
    def _loading_scope(self):
        """Loading is true while awaiting and false on every exit path."""
        self._set_loading(True)
        try:
            yield
        finally:
            self._set_loading(False)

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        if not self._torn_down:
            self.loading_changed.emit(loading)

    def _log_failure(self, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Query failed", exc_info=error)
