from typing import override

from ...application.ports.services import LoggerPort


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_run_start(
        self, request_id: int, term_count: int, mapping_count: int, threshold: float
    ) -> None:
        return None

    @override
    def log_run_complete(
        self, request_id: int, suggestion_count: int, unmatched_count: int
    ) -> None:
        return None

    @override
    def log_stale_response(self, request_id: int, latest_request_id: int) -> None:
        return None

    @override
    def log_mapping_change(self, reason: str, mapping_ids: tuple[str, ...]) -> None:
        return None
