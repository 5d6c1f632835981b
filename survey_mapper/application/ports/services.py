from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from ...domain.entities.auto_mapping_config import AutoMappingConfig
    from ..models import (
        AutoMapPayload,
        ConfidencePayload,
        ProgressMessage,
        WorkerResponse,
    )


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_run_start(
        self, request_id: int, term_count: int, mapping_count: int, threshold: float
    ) -> None: ...

    def log_run_complete(
        self, request_id: int, suggestion_count: int, unmatched_count: int
    ) -> None: ...

    def log_stale_response(self, request_id: int, latest_request_id: int) -> None: ...

    def log_mapping_change(self, reason: str, mapping_ids: tuple[str, ...]) -> None: ...


@runtime_checkable
class ExecutionHostPort(Protocol):
    pass

    @property
    def latest_request_id(self) -> int: ...

    def submit(
        self,
        action: str,
        payload: AutoMapPayload | ConfidencePayload,
        config: AutoMappingConfig,
        *,
        on_progress: Callable[[ProgressMessage], None] | None = None,
    ) -> PendingRequestLike: ...

    async def request(
        self,
        action: str,
        payload: AutoMapPayload | ConfidencePayload,
        config: AutoMappingConfig,
        *,
        on_progress: Callable[[ProgressMessage], None] | None = None,
    ) -> WorkerResponse: ...

    def is_latest(self, request_id: int) -> bool: ...

    def shutdown(self, *, wait: bool = True) -> None: ...


@runtime_checkable
class PendingRequestLike(Protocol):
    pass

    @property
    def request_id(self) -> int: ...

    def result(self, timeout: float | None = None) -> WorkerResponse: ...
