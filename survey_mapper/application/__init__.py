"""Application layer: use cases, request/response models and ports."""

from .auto_mapping_use_case import AutoMappingDependencies, AutoMappingUseCase
from .models import (
    AcceptResult,
    AutoMapPayload,
    AutoMapResult,
    ChangeReason,
    ConfidencePayload,
    MappingsChangedEvent,
    ProgressMessage,
    WorkerRequest,
    WorkerResponse,
)

__all__ = [
    "AcceptResult",
    "AutoMapPayload",
    "AutoMapResult",
    "AutoMappingDependencies",
    "AutoMappingUseCase",
    "ChangeReason",
    "ConfidencePayload",
    "MappingsChangedEvent",
    "ProgressMessage",
    "WorkerRequest",
    "WorkerResponse",
]
