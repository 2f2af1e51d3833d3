"""Geometry backend client, polling and model workflow."""

from .assembler import ModelContract, locate_contract
from .client import FetchedImage, GeometryBackendClient
from .polling import (
    poll_until_ready,
    submit_and_wait_for_customization,
    submit_and_wait_for_export,
    wait_for_customization_result,
    wait_for_export_result,
)
from .runner import run_model

__all__ = [
    "FetchedImage",
    "GeometryBackendClient",
    "ModelContract",
    "locate_contract",
    "poll_until_ready",
    "run_model",
    "submit_and_wait_for_customization",
    "submit_and_wait_for_export",
    "wait_for_customization_result",
    "wait_for_export_result",
]
