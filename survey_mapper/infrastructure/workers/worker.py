"""Worker-side entry point.

``handle_request`` runs inside the executor (thread or process). It keeps no
state between calls, pushes progress messages onto the request's channel and
returns exactly one :class:`WorkerResponse`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ...application.models import (
    AutoMapPayload,
    ConfidencePayload,
    ProgressMessage,
    WorkerResponse,
)
from ...constants import WorkerActions
from ...domain.entities.mapping import SuggestionRun
from ...domain.services.matching import SPECIALTY_SYNONYMS, SuggestionBuilder, score

if TYPE_CHECKING:
    from ...application.models import WorkerRequest


class MessageChannel(Protocol):
    def put(self, item: ProgressMessage) -> None: ...


class UnknownActionError(ValueError):
    pass


def _require[T](payload: object, expected: type[T], action: str) -> T:
    if not isinstance(payload, expected):
        raise TypeError(
            f"{action} expects {expected.__name__}, got {type(payload).__name__}"
        )
    return payload


def _run_suggestions(
    request: WorkerRequest, channel: MessageChannel | None, *, report: bool
) -> SuggestionRun:
    payload = _require(request.payload, AutoMapPayload, request.action)
    builder = SuggestionBuilder(
        request.config,
        learned_corrections=payload.learned_corrections,
        synonyms=payload.synonyms,
        progress_every=request.progress_every,
    )

    on_progress = None
    if report and channel is not None:

        def on_progress(progress: float) -> None:
            channel.put(
                ProgressMessage(request_id=request.request_id, progress=progress)
            )

    return builder.run(payload.unmapped_terms, payload.existing_mappings, on_progress)


def _calculate_confidence(request: WorkerRequest) -> float:
    payload = _require(request.payload, ConfidencePayload, request.action)
    return score(
        payload.term,
        payload.mapping,
        request.config,
        payload.synonyms if payload.synonyms is not None else SPECIALTY_SYNONYMS,
    )


def dispatch(request: WorkerRequest, channel: MessageChannel | None = None) -> object:
    match request.action:
        case WorkerActions.AUTO_MAP:
            return _run_suggestions(request, channel, report=True)
        case WorkerActions.GENERATE_SUGGESTIONS:
            return _run_suggestions(request, channel, report=False)
        case WorkerActions.CALCULATE_CONFIDENCE:
            return _calculate_confidence(request)
        case _:
            raise UnknownActionError(f"Unknown action: {request.action}")


def handle_request(
    request: WorkerRequest, channel: MessageChannel | None = None
) -> WorkerResponse:
    try:
        data = dispatch(request, channel)
    except Exception as exc:
        # Every failure becomes the single terminal response for this id.
        return WorkerResponse.failure(
            request.request_id,
            str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
        )
    return WorkerResponse.ok(request.request_id, data)
