"""
Utils Module
通用工具函数
"""
from .logger import setup_logger
from .exceptions import (
    ErrorKind,
    LegobotError,
    DeadlineExceeded,
    ConfigurationMismatch,
    InputRejected,
    TransportFailure,
    ScraperError,
    RemoteComputationFailed,
    EmptyResult,
)

__all__ = [
    "setup_logger",
    "ErrorKind",
    "LegobotError",
    "DeadlineExceeded",
    "ConfigurationMismatch",
    "InputRejected",
    "TransportFailure",
    "ScraperError",
    "RemoteComputationFailed",
    "EmptyResult",
]
