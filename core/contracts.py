"""Typed contracts for the geometry backend session protocol and the job entry point."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from utils.exceptions import ConfigurationMismatch, LegobotError


NO_DELAY = -1.0


class ExportStatus(str, Enum):
    """Completion status reported for the computation and collect steps of an export."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class ContentItem(BaseModel):
    """One result item of a ready artifact: inline data or a retrieval URL."""

    data: Any = None
    href: Optional[str] = None
    format: Optional[str] = None
    size: Optional[int] = None


class ParameterDefinition(BaseModel):
    """Input slot declared by the remote model."""

    id: str
    name: str = ""
    type: str
    format: List[str] = Field(default_factory=list)
    max: Optional[float] = None

    @field_validator("format", mode="before")
    @classmethod
    def _format_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return [str(item) for item in value]


class _ArtifactBase(BaseModel):
    id: str
    name: str = ""
    version: Optional[str] = None
    delay: Optional[float] = None
    content: List[ContentItem] = Field(default_factory=list)

    @field_validator("content", mode="before")
    @classmethod
    def _content_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def pending_delay(self) -> float:
        """Reported delay in msec, NO_DELAY when the backend did not report one."""
        return NO_DELAY if self.delay is None else float(self.delay)

    @property
    def is_pending(self) -> bool:
        return self.pending_delay > 0

    @property
    def is_ready(self) -> bool:
        return not self.is_pending and bool(self.content)


class OutputState(_ArtifactBase):
    """Computed (or computing) output of a customization."""

    kind: Literal["output"] = "output"


class ExportState(_ArtifactBase):
    """Computed (or computing) export, with separate computation and collect statuses."""

    kind: Literal["export"] = "export"
    type: Optional[str] = None
    status_computation: Optional[str] = None
    status_collect: Optional[str] = None


Artifact = Annotated[Union[OutputState, ExportState], Field(discriminator="kind")]

_artifact_adapter: TypeAdapter = TypeAdapter(Artifact)


def _parse_parameters(raw: Dict[str, Any]) -> Dict[str, ParameterDefinition]:
    parsed: Dict[str, ParameterDefinition] = {}
    for key, value in dict(raw or {}).items():
        item = dict(value or {})
        item.setdefault("id", key)
        parsed[key] = ParameterDefinition.model_validate(item)
    return parsed


def _parse_artifacts(raw: Dict[str, Any], kind: str) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {}
    for key, value in dict(raw or {}).items():
        item = dict(value or {})
        item.setdefault("id", key)
        item["kind"] = kind
        parsed[key] = _artifact_adapter.validate_python(item)
    return parsed


def _parse_sections(payload: Dict[str, Any]) -> Dict[str, Any]:
    sections: Dict[str, Any] = {}
    if payload.get("parameters") is not None:
        sections["parameters"] = _parse_parameters(payload["parameters"])
    if payload.get("outputs") is not None:
        sections["outputs"] = _parse_artifacts(payload["outputs"], "output")
    if payload.get("exports") is not None:
        sections["exports"] = _parse_artifacts(payload["exports"], "export")
    return sections


def _session_id_from_actions(payload: Dict[str, Any]) -> str:
    for action in list(payload.get("actions") or []):
        if not isinstance(action, dict) or action.get("name") != "default":
            continue
        segments = [part for part in urlparse(str(action.get("href") or "")).path.split("/") if part]
        if "session" in segments:
            idx = segments.index("session")
            if idx + 1 < len(segments):
                return segments[idx + 1]
    return ""


class RemoteSession(BaseModel):
    """State of one geometry backend session.

    Built once by ``from_document`` at initialization. Every later response
    yields a new instance via ``apply``: each section present in the response
    replaces the previous one wholesale, absent sections are carried over.
    """

    session_id: str
    parameters: Dict[str, ParameterDefinition] = Field(default_factory=dict)
    outputs: Dict[str, OutputState] = Field(default_factory=dict)
    exports: Dict[str, ExportState] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, payload: Dict[str, Any]) -> "RemoteSession":
        session_id = str(payload.get("sessionId") or "").strip() or _session_id_from_actions(payload)
        if not session_id:
            raise ConfigurationMismatch("Session response carries no session id", element="session_id")
        return cls(session_id=session_id, **_parse_sections(payload))

    def apply(self, payload: Dict[str, Any]) -> "RemoteSession":
        return self.model_copy(update=_parse_sections(payload))

    def output_versions(self) -> Dict[str, str]:
        return {oid: output.version for oid, output in self.outputs.items() if output.version is not None}

    def export_version(self, export_id: str) -> Dict[str, str]:
        export = self.exports.get(export_id)
        if export is None or export.version is None:
            return {}
        return {export_id: export.version}


class UploadTicket(BaseModel):
    """Upload target handed out for one file parameter. Used once."""

    parameter_id: str
    href: str
    asset_id: str
    headers: Dict[str, str] = Field(default_factory=dict)


class RunModelInput(BaseModel):
    text: str
    image_url: str


class RunModelOutput(BaseModel):
    text: str
    image_url: str


_ERROR_ATTRS = (
    "element",
    "constraint",
    "status",
    "artifact_id",
    "url",
    "status_code",
    "source",
    "budget_msec",
    "elapsed_msec",
)


class ErrorReport(BaseModel):
    """Serializable description of a failed invocation."""

    kind: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorReport":
        if isinstance(exc, LegobotError):
            details = dict(exc.details)
            for attr in _ERROR_ATTRS:
                value = getattr(exc, attr, None)
                if value is not None:
                    details[attr] = value
            return cls(kind=exc.kind.value, message=exc.message, details=details)
        return cls(kind=type(exc).__name__, message=str(exc))


class ProcessResult(BaseModel):
    """Outcome of one scheduled invocation."""

    success: bool
    error: Optional[ErrorReport] = None
    post_id: Optional[str] = None
    output: Optional[RunModelOutput] = None
