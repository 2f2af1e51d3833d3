"""
Structural lookup, input validation and payload assembly for the model workflow.

The remote model is expected to declare:

  * a ``File`` parameter accepting images
  * a ``String`` parameter accepting at least 140 characters
  * an output whose name contains "text"
  * an export of type ``download`` producing the image

Identifiers are assigned per deployment, so every element is found by
predicate. The first match in declaration order wins.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar

from core import ExportState, ExportStatus, OutputState, ParameterDefinition, RemoteSession
from utils.exceptions import ConfigurationMismatch, EmptyResult, InputRejected, RemoteComputationFailed

from .client import FetchedImage


logger = logging.getLogger(__name__)

T = TypeVar("T")

IMAGE_FORMAT_PREFIX = "image/"
MIN_TEXT_LENGTH = 140
TEXT_OUTPUT_MARKER = "text"
DOWNLOAD_EXPORT_TYPE = "download"


@dataclass
class ModelContract:
    """The four backend elements the workflow relies on."""

    image_parameter: ParameterDefinition
    text_parameter: ParameterDefinition
    text_output: OutputState
    download_export: ExportState


def _first(items: Iterable[T], predicate: Callable[[T], bool]) -> Optional[T]:
    return next((item for item in items if predicate(item)), None)


def find_image_parameter(session: RemoteSession) -> Optional[ParameterDefinition]:
    return _first(
        session.parameters.values(),
        lambda p: p.type == "File" and any(f.startswith(IMAGE_FORMAT_PREFIX) for f in p.format),
    )


def find_text_parameter(session: RemoteSession) -> Optional[ParameterDefinition]:
    return _first(
        session.parameters.values(),
        lambda p: p.type == "String" and p.max is not None and p.max >= MIN_TEXT_LENGTH,
    )


def find_text_output(session: RemoteSession) -> Optional[OutputState]:
    return _first(session.outputs.values(), lambda o: TEXT_OUTPUT_MARKER in o.name.lower())


def find_download_export(session: RemoteSession) -> Optional[ExportState]:
    return _first(session.exports.values(), lambda e: e.type == DOWNLOAD_EXPORT_TYPE)


def locate_contract(session: RemoteSession) -> ModelContract:
    """Find all contract elements or raise ConfigurationMismatch naming the missing one."""
    image_parameter = find_image_parameter(session)
    if image_parameter is None:
        logger.debug("Declared parameters: %s", list(session.parameters.values()))
        raise ConfigurationMismatch("Could not find a 'File' parameter which accepts images", element="image_parameter")

    text_parameter = find_text_parameter(session)
    if text_parameter is None:
        logger.debug("Declared parameters: %s", list(session.parameters.values()))
        raise ConfigurationMismatch(
            f"Could not find a 'String' parameter which accepts strings with a length >= {MIN_TEXT_LENGTH} characters",
            element="text_parameter",
        )

    text_output = find_text_output(session)
    if text_output is None:
        logger.debug("Declared outputs: %s", list(session.outputs.values()))
        raise ConfigurationMismatch("Could not find an output whose name includes 'text'", element="text_output")

    download_export = find_download_export(session)
    if download_export is None:
        logger.debug("Declared exports: %s", list(session.exports.values()))
        raise ConfigurationMismatch("Could not find an export of type 'download'", element="download_export")

    return ModelContract(
        image_parameter=image_parameter,
        text_parameter=text_parameter,
        text_output=text_output,
        download_export=download_export,
    )


def validate_text(contract: ModelContract, text: str) -> None:
    limit = contract.text_parameter.max
    if limit is not None and len(text) > limit:
        raise InputRejected(
            f"The text input parameter does not accept strings whose size exceeds {limit:.0f} ({len(text)})",
            constraint="text_length",
        )


def validate_image(contract: ModelContract, image: FetchedImage) -> None:
    param = contract.image_parameter
    if image.content_type not in param.format:
        raise InputRejected(
            f"The image input parameter does not accept image type {image.content_type or '<unknown>'}",
            constraint="image_format",
        )
    if param.max is not None and image.size > param.max:
        raise InputRejected(
            f"The image input parameter does not accept images whose size exceeds {param.max:.0f} ({image.size})",
            constraint="image_size",
        )


def build_customization(contract: ModelContract, asset_id: str, text: str) -> Dict[str, Any]:
    return {
        contract.image_parameter.id: asset_id,
        contract.text_parameter.id: text,
    }


def build_export(contract: ModelContract, parameters: Dict[str, Any], server_wait_msec: int) -> Dict[str, Any]:
    return {
        "exports": {"id": contract.download_export.id},
        "parameters": dict(parameters),
        "max_wait_time": int(server_wait_msec),
    }


def extract_text(session: RemoteSession, contract: ModelContract) -> str:
    """First content item of the text output."""
    output_id = contract.text_output.id
    output = session.outputs.get(output_id)
    if output is None or not output.content or output.content[0].data is None:
        raise EmptyResult("Output result content is empty", artifact_id=output_id)
    data = output.content[0].data
    return data if isinstance(data, str) else str(data)


def extract_image_url(session: RemoteSession, contract: ModelContract) -> str:
    """Download URL of the export, once both completion statuses report success."""
    export_id = contract.download_export.id
    export = session.exports.get(export_id)
    if export is None:
        raise EmptyResult("Export result content is empty", artifact_id=export_id)
    if export.status_computation != ExportStatus.SUCCESS.value:
        raise RemoteComputationFailed(
            f"Export computation did not succeed ({export.status_computation})",
            status="computation",
        )
    if export.status_collect != ExportStatus.SUCCESS.value:
        raise RemoteComputationFailed(
            f"Export collect did not succeed ({export.status_collect})",
            status="collect",
        )
    if not export.content or not export.content[0].href:
        raise EmptyResult("Export result content is empty", artifact_id=export_id)
    return str(export.content[0].href)
