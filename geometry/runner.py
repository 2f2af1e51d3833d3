"""End-to-end run of the geometry model for one post."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from config import GeometrySettings
from core import RunModelInput, RunModelOutput
from core.deadline import Clock
from utils.exceptions import ConfigurationMismatch

from .assembler import (
    build_customization,
    build_export,
    extract_image_url,
    extract_text,
    locate_contract,
    validate_image,
    validate_text,
)
from .client import GeometryBackendClient
from .polling import SleepFn, submit_and_wait_for_customization, submit_and_wait_for_export


logger = logging.getLogger(__name__)


async def run_model(
    model_input: RunModelInput,
    config: GeometrySettings,
    *,
    client: Optional[GeometryBackendClient] = None,
    sleep: SleepFn = asyncio.sleep,
    clock: Clock = time.monotonic,
) -> RunModelOutput:
    """
    Run a customization and an export for the configured model.

    Steps: open a session, locate the contract elements, validate the text,
    fetch and validate the image, upload it, customize, export. Nothing that
    changes remote state happens before validation passed.

    Args:
        model_input: post text and image URL
        config: ticket, base URL and wait budgets
        client: pre-built backend client (closed on return)

    Returns:
        generated text and download URL of the exported image
    """
    ticket = str(config.ticket or "").strip()
    if not ticket:
        raise ConfigurationMismatch("geometry backend ticket is not configured", element="ticket")

    backend = client or GeometryBackendClient(config.model_view_url, timeout_s=config.timeout_s)
    async with backend:
        session = await backend.initialize(ticket)
        contract = locate_contract(session)

        validate_text(contract, model_input.text)
        image = await backend.fetch_image(model_input.image_url)
        validate_image(contract, image)

        upload = await backend.request_upload(
            session,
            contract.image_parameter.id,
            content_type=image.content_type,
            size=image.size,
        )
        await backend.upload(upload, image.data, image.content_type)

        customization = build_customization(contract, upload.asset_id, model_input.text)
        customized = await submit_and_wait_for_customization(
            backend,
            session,
            customization,
            config.customization_max_wait_msec,
            sleep=sleep,
            clock=clock,
        )
        text = extract_text(customized, contract)
        logger.info("Customization of session %s finished", session.session_id)

        exported = await submit_and_wait_for_export(
            backend,
            customized,
            build_export(contract, customization, config.export_server_wait_msec),
            config.export_max_wait_msec,
            sleep=sleep,
            clock=clock,
        )
        image_url = extract_image_url(exported, contract)
        logger.info("Export %s of session %s finished", contract.download_export.id, session.session_id)

    return RunModelOutput(text=text, image_url=image_url)
