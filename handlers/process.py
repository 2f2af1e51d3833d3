"""Scheduled entry point: search posts, run the model on the first hit, report the outcome."""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from config import GeometrySettings, Settings, get_settings
from core import ErrorReport, ProcessResult, RunModelInput, RunModelOutput
from geometry import run_model
from scrapers import BaseScraper, TwitterScraper


logger = logging.getLogger(__name__)

Runner = Callable[[RunModelInput, GeometrySettings], Awaitable[RunModelOutput]]


async def process(
    event: Optional[Dict[str, Any]] = None,
    context: Any = None,
    *,
    settings: Optional[Settings] = None,
    scraper: Optional[BaseScraper] = None,
    runner: Runner = run_model,
) -> ProcessResult:
    """
    Handle one trigger event. Never raises: every failure is logged and
    reported as ``ProcessResult(success=False, error=...)``.
    """
    try:
        logger.debug("Event: %s", json.dumps(event, default=str))
        settings = settings or get_settings()
        query = settings.twitter.query

        search = scraper or TwitterScraper(settings)
        async with search:
            posts = await search.search(query)
        logger.info("Fetched %d %s posts", len(posts), query)

        if not posts:
            logger.info("No posts")
            return ProcessResult(success=True)

        post = posts[0]
        output = await runner(
            RunModelInput(text=post.content, image_url=str(post.image_url or "")),
            settings.geometry,
        )
        logger.info("Response for post %s: %s", post.id, output.model_dump_json(indent=2))
        return ProcessResult(success=True, post_id=post.id, output=output)

    except Exception as exc:
        logger.exception("Exception: %s", exc)
        return ProcessResult(success=False, error=ErrorReport.from_exception(exc))
