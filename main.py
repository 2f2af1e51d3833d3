"""CLI entrypoint: run one invocation or the fixed-rate schedule."""

from __future__ import annotations

import argparse
import asyncio
import json

from config import get_settings
from handlers import PeriodicTrigger, build_trigger_event, process
from utils import setup_logger


async def _run_once() -> int:
    result = await process(build_trigger_event(source="legobot.cli"))
    print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0 if result.success else 1


async def _run_schedule(interval_sec: float) -> int:
    trigger = PeriodicTrigger(process, interval_sec=interval_sec)
    try:
        await trigger.run_forever()
    finally:
        await trigger.stop()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="legobot: posts in, geometry backend images out")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("run-once")

    schedule = sub.add_parser("schedule")
    schedule.add_argument("--interval-sec", type=float, default=None)

    args = parser.parse_args()
    settings = get_settings()
    setup_logger(level=settings.general.log_level, log_file=settings.general.log_file)

    if args.command == "run-once":
        raise SystemExit(asyncio.run(_run_once()))

    if args.command == "schedule":
        interval = args.interval_sec if args.interval_sec is not None else settings.schedule.interval_sec
        try:
            asyncio.run(_run_schedule(interval))
        except KeyboardInterrupt:
            pass
        return


if __name__ == "__main__":
    main()
