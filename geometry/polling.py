"""Delay-driven polling of the output/export cache endpoints."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, TypeVar

from core import NO_DELAY, DeadlineClock, RemoteSession
from core.deadline import Clock

if TYPE_CHECKING:
    from .client import GeometryBackendClient


logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[Any]]


def max_output_delay(session: RemoteSession) -> float:
    """Largest reported output delay in msec, NO_DELAY when none was reported."""
    return max((output.pending_delay for output in session.outputs.values()), default=NO_DELAY)


def export_delay(session: RemoteSession, export_id: str) -> float:
    export = session.exports.get(export_id)
    if export is None:
        return NO_DELAY
    return export.pending_delay


async def poll_until_ready(
    document: T,
    extract_delay: Callable[[T], float],
    refetch: Callable[[], Awaitable[T]],
    deadline: DeadlineClock,
    *,
    sleep: SleepFn = asyncio.sleep,
) -> T:
    """
    Sleep for the reported delay and refetch until the delay drops to zero.

    Sleeps are clamped to the remaining budget of ``deadline``; once the budget
    is used up while the document is still pending, DeadlineExceeded is raised
    without another refetch.
    """
    delay = extract_delay(document)
    while delay > 0:
        delay = deadline.clamp(delay)
        logger.debug("Pending for %.0f msec (elapsed %.0f msec)", delay, deadline.elapsed_msec())
        await sleep(delay / 1000.0)
        document = await refetch()
        delay = extract_delay(document)
    return document


async def wait_for_customization_result(
    client: "GeometryBackendClient",
    session: RemoteSession,
    deadline: DeadlineClock,
    *,
    sleep: SleepFn = asyncio.sleep,
) -> RemoteSession:
    """Wait until every output of a customization response is ready."""
    # versions are captured once; the cache answers relative to them
    versions = session.output_versions()
    latest = session

    async def _refetch() -> RemoteSession:
        nonlocal latest
        latest = await client.get_output_cache(latest, versions)
        return latest

    return await poll_until_ready(session, max_output_delay, _refetch, deadline, sleep=sleep)


async def wait_for_export_result(
    client: "GeometryBackendClient",
    session: RemoteSession,
    export_id: str,
    deadline: DeadlineClock,
    *,
    sleep: SleepFn = asyncio.sleep,
) -> RemoteSession:
    versions = session.export_version(export_id)
    latest = session

    async def _refetch() -> RemoteSession:
        nonlocal latest
        latest = await client.get_export_cache(latest, versions)
        return latest

    return await poll_until_ready(
        session,
        lambda doc: export_delay(doc, export_id),
        _refetch,
        deadline,
        sleep=sleep,
    )


async def submit_and_wait_for_customization(
    client: "GeometryBackendClient",
    session: RemoteSession,
    body: Dict[str, Any],
    max_wait_msec: float = -1,
    *,
    sleep: SleepFn = asyncio.sleep,
    clock: Clock = time.monotonic,
) -> RemoteSession:
    """Submit a customization and wait for its outputs. Submission time counts against ``max_wait_msec``."""
    deadline = DeadlineClock.start(max_wait_msec, clock=clock)
    result = await client.customize(session, body)
    logger.debug("Customization submitted after %.0f msec", deadline.elapsed_msec())
    return await wait_for_customization_result(client, result, deadline, sleep=sleep)


async def submit_and_wait_for_export(
    client: "GeometryBackendClient",
    session: RemoteSession,
    body: Dict[str, Any],
    max_wait_msec: float = -1,
    *,
    sleep: SleepFn = asyncio.sleep,
    clock: Clock = time.monotonic,
) -> RemoteSession:
    """Submit an export request (``body["exports"]["id"]`` names the export) and wait for it."""
    export_id = str(body["exports"]["id"])
    deadline = DeadlineClock.start(max_wait_msec, clock=clock)
    result = await client.export(session, body)
    logger.debug("Export %s submitted after %.0f msec", export_id, deadline.elapsed_msec())
    return await wait_for_export_result(client, result, export_id, deadline, sleep=sleep)
