"""Background execution of matching requests."""

from .execution_host import ExecutionHost, PendingRequest
from .worker import dispatch, handle_request

__all__ = ["ExecutionHost", "PendingRequest", "dispatch", "handle_request"]
