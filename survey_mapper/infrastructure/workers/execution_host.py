"""Background execution of matching requests.

The host hands each request to an executor as one immutable message and
returns immediately. A pump thread per request forwards progress messages in
order and then resolves the request's future with exactly one response.

Request ids come from a counter that is advanced under the same lock as the
dispatch itself, so ids increase in submission order. Callers keep only the
latest response: ``is_latest`` tells them whether a response is still wanted.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from concurrent.futures import (
    BrokenExecutor,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
)
from dataclasses import dataclass
import itertools
import multiprocessing
from multiprocessing.managers import SyncManager
import queue
import threading
from typing import TYPE_CHECKING

from ...application.models import WorkerRequest, WorkerResponse
from ...constants import Defaults
from ...domain.entities.auto_mapping_config import AutoMappingConfig
from ...domain.exceptions import (
    InvalidConfigError,
    WorkerCrashedError,
    WorkerUnavailableError,
)
from ..logging.null_logger import NullLogger
from .worker import handle_request

if TYPE_CHECKING:
    from ...application.models import (
        AutoMapPayload,
        ConfidencePayload,
        ProgressMessage,
    )
    from ...application.ports.services import LoggerPort

type ProgressHandler = Callable[[ProgressMessage], None]

CANCELLED_ERROR_TYPE = "RequestCancelled"


@dataclass(slots=True)
class PendingRequest:
    request_id: int
    action: str
    future: Future[WorkerResponse]

    def result(self, timeout: float | None = None) -> WorkerResponse:
        return self.future.result(timeout=timeout)

    def done(self) -> bool:
        return self.future.done()


class ExecutionHost:
    """Runs matching requests off the calling thread.

    Example:
        >>> with ExecutionHost() as host:
        ...     pending = host.submit("autoMap", payload, config, on_progress=print)
        ...     response = pending.result()
        ...     if host.is_latest(response.request_id):
        ...         use(response.data)
    """

    def __init__(
        self,
        *,
        max_workers: int = Defaults.MAX_WORKERS,
        use_processes: bool = Defaults.USE_PROCESSES,
        progress_every: int = Defaults.PROGRESS_EVERY,
        poll_interval: float = Defaults.PROGRESS_POLL_INTERVAL,
        logger: LoggerPort | None = None,
        executor_factory: Callable[[], Executor] | None = None,
    ) -> None:
        """Initialize the host.

        Args:
            max_workers: Executor size
            use_processes: Use a process pool instead of a thread pool
            progress_every: Progress cadence, in terms, passed to every request
            poll_interval: Seconds a pump waits for a message before checking
                whether the worker finished
            logger: Logger for host-level events
            executor_factory: Overrides executor construction (tests, custom pools)
        """
        super().__init__()
        self.max_workers = max_workers
        self.use_processes = use_processes
        self.progress_every = progress_every
        self.poll_interval = poll_interval
        self._logger: LoggerPort = logger or NullLogger()
        self._executor_factory = executor_factory or self._default_executor
        self._executor: Executor | None = None
        self._manager: SyncManager | None = None
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._latest_request_id = 0
        self._inflight: dict[int, Future[WorkerResponse]] = {}
        self._pumps: dict[int, threading.Thread] = {}
        self._closed = False

    def __enter__(self) -> ExecutionHost:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    def is_latest(self, request_id: int) -> bool:
        return request_id == self._latest_request_id

    def submit(
        self,
        action: str,
        payload: AutoMapPayload | ConfidencePayload,
        config: AutoMappingConfig,
        *,
        on_progress: ProgressHandler | None = None,
    ) -> PendingRequest:
        """Dispatch one request and return without waiting for it.

        A newer submission supersedes older ones: queued work that has not
        started yet is cancelled, and its future resolves to an error response.
        """
        if not isinstance(config, AutoMappingConfig):
            raise InvalidConfigError(
                f"config must be an AutoMappingConfig, got {type(config).__name__}"
            )

        outcome: Future[WorkerResponse] = Future()
        with self._lock:
            request_id = next(self._ids)
            self._latest_request_id = request_id
            pending = PendingRequest(
                request_id=request_id, action=action, future=outcome
            )
            if self._closed:
                unavailable = WorkerUnavailableError("Execution host is shut down")
                outcome.set_result(_failure(request_id, unavailable))
                return pending

            request = WorkerRequest(
                action=action,
                request_id=request_id,
                payload=payload,
                config=config,
                progress_every=self.progress_every,
            )
            try:
                channel = self._new_channel()
                executor = self._ensure_executor()
                work = executor.submit(handle_request, request, channel)
            except (RuntimeError, OSError) as exc:
                self._logger.error(f"Request {request_id}: worker unavailable ({exc})")
                unavailable = WorkerUnavailableError(str(exc))
                outcome.set_result(_failure(request_id, unavailable))
                return pending

            for stale_id, stale in self._inflight.items():
                if stale.cancel():
                    self._logger.debug(f"Request {stale_id} superseded before start")
            self._inflight[request_id] = work

            pump = threading.Thread(
                target=self._pump,
                args=(request_id, work, channel, outcome, on_progress),
                name=f"survey-mapper-pump-{request_id}",
                daemon=True,
            )
            self._pumps[request_id] = pump
            pump.start()

        self._logger.debug(f"Request {request_id}: dispatched {action}")
        return pending

    async def request(
        self,
        action: str,
        payload: AutoMapPayload | ConfidencePayload,
        config: AutoMappingConfig,
        *,
        on_progress: ProgressHandler | None = None,
    ) -> WorkerResponse:
        """Awaitable form of :meth:`submit`.

        Progress callbacks are scheduled on the awaiting event loop, ahead of
        the final response.
        """
        loop = asyncio.get_running_loop()
        forward: ProgressHandler | None = None
        if on_progress is not None:
            handler = on_progress

            def forward(message: ProgressMessage) -> None:
                loop.call_soon_threadsafe(handler, message)

        pending = self.submit(action, payload, config, on_progress=forward)
        return await asyncio.wrap_future(pending.future)

    def shutdown(self, *, wait: bool = True) -> None:
        """Stop accepting requests and release the executor.

        Every request already submitted still resolves to exactly one
        response. Pumps are drained before the message manager goes away.
        """
        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
            manager, self._manager = self._manager, None
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=not wait)
        if wait:
            with self._lock:
                pumps = list(self._pumps.values())
            for pump in pumps:
                if pump is not threading.current_thread():
                    pump.join()
        if manager is not None:
            manager.shutdown()

    def _default_executor(self) -> Executor:
        if self.use_processes:
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="survey-mapper-worker"
        )

    def _ensure_executor(self) -> Executor:
        if self._executor is None:
            self._executor = self._executor_factory()
        return self._executor

    def _new_channel(self) -> queue.Queue[ProgressMessage]:
        if not self.use_processes:
            return queue.Queue()
        if self._manager is None:
            self._manager = multiprocessing.Manager()
        return self._manager.Queue()

    def _pump(
        self,
        request_id: int,
        work: Future[WorkerResponse],
        channel: queue.Queue[ProgressMessage],
        outcome: Future[WorkerResponse],
        on_progress: ProgressHandler | None,
    ) -> None:
        last_progress = -1.0

        def deliver(message: ProgressMessage) -> None:
            nonlocal last_progress
            if on_progress is None or message.progress < last_progress:
                return
            last_progress = message.progress
            try:
                on_progress(message)
            except Exception as exc:
                self._logger.error(
                    f"Request {request_id}: progress handler failed ({exc})"
                )

        try:
            self._drain(channel, work, deliver)
        except Exception as exc:
            # The channel is gone (manager shut down); stop reading.
            self._logger.warning(
                f"Request {request_id}: progress channel closed ({exc!r})"
            )

        try:
            response = self._final_response(request_id, work)
        except Exception as exc:
            response = _failure(request_id, WorkerCrashedError(str(exc)))
        with self._lock:
            self._inflight.pop(request_id, None)
            self._pumps.pop(request_id, None)
        outcome.set_result(response)

    def _drain(
        self,
        channel: queue.Queue[ProgressMessage],
        work: Future[WorkerResponse],
        deliver: ProgressHandler,
    ) -> None:
        while True:
            try:
                deliver(channel.get(timeout=self.poll_interval))
            except queue.Empty:
                if work.done():
                    break
        while True:
            try:
                deliver(channel.get_nowait())
            except queue.Empty:
                break

    def _final_response(
        self, request_id: int, work: Future[WorkerResponse]
    ) -> WorkerResponse:
        if work.cancelled():
            return WorkerResponse.failure(
                request_id,
                "Request superseded before it started",
                error_type=CANCELLED_ERROR_TYPE,
            )
        exc = work.exception()
        if exc is None:
            return work.result()
        self._logger.error(f"Request {request_id}: worker crashed ({exc})")
        if isinstance(exc, BrokenExecutor):
            # Drop the broken pool; the next request gets a fresh one.
            with self._lock:
                broken, self._executor = self._executor, None
            if broken is not None:
                broken.shutdown(wait=False)
        return _failure(request_id, WorkerCrashedError(f"Worker crashed: {exc}"))


def _failure(request_id: int, exc: Exception) -> WorkerResponse:
    return WorkerResponse.failure(request_id, str(exc), error_type=type(exc).__name__)
