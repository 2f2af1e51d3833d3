"""Entry point and periodic trigger."""

from .process import process
from .schedule import PeriodicTrigger, build_trigger_event

__all__ = [
    "PeriodicTrigger",
    "build_trigger_event",
    "process",
]
