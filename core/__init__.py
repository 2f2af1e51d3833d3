"""Core contracts and shared types for the geometry backend workflow."""

from .contracts import (
    Artifact,
    ContentItem,
    ErrorReport,
    ExportState,
    ExportStatus,
    NO_DELAY,
    OutputState,
    ParameterDefinition,
    ProcessResult,
    RemoteSession,
    RunModelInput,
    RunModelOutput,
    UploadTicket,
)
from .deadline import UNBOUNDED, DeadlineClock, remaining_msec

__all__ = [
    "Artifact",
    "ContentItem",
    "DeadlineClock",
    "ErrorReport",
    "ExportState",
    "ExportStatus",
    "NO_DELAY",
    "OutputState",
    "ParameterDefinition",
    "ProcessResult",
    "RemoteSession",
    "RunModelInput",
    "RunModelOutput",
    "UNBOUNDED",
    "UploadTicket",
    "remaining_msec",
]
