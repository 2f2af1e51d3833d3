"""
Custom Exceptions
自定义异常类
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """错误类型 (闭合集合)"""
    DEADLINE_EXCEEDED = "deadline_exceeded"
    CONFIGURATION_MISMATCH = "configuration_mismatch"
    INPUT_REJECTED = "input_rejected"
    TRANSPORT_FAILURE = "transport_failure"
    REMOTE_COMPUTATION_FAILED = "remote_computation_failed"
    EMPTY_RESULT = "empty_result"


class LegobotError(Exception):
    """基础异常类"""

    kind: ErrorKind

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DeadlineExceeded(LegobotError):
    """等待超过截止时间"""

    kind = ErrorKind.DEADLINE_EXCEEDED

    def __init__(self, message: str, budget_msec: float = None, elapsed_msec: float = None, **kwargs):
        super().__init__(message, kwargs)
        self.budget_msec = budget_msec
        self.elapsed_msec = elapsed_msec


class ConfigurationMismatch(LegobotError):
    """远程模型不满足工作流假设"""

    kind = ErrorKind.CONFIGURATION_MISMATCH

    def __init__(self, message: str, element: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.element = element


class InputRejected(LegobotError):
    """输入违反参数约束"""

    kind = ErrorKind.INPUT_REJECTED

    def __init__(self, message: str, constraint: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.constraint = constraint


class TransportFailure(LegobotError):
    """网络 / HTTP 错误"""

    kind = ErrorKind.TRANSPORT_FAILURE

    def __init__(self, message: str, url: str = None, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, kwargs)
        self.url = url
        self.status_code = status_code


class ScraperError(TransportFailure):
    """抓取器错误"""

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, **kwargs)
        self.source = source


class RemoteComputationFailed(LegobotError):
    """远程计算或导出保存失败"""

    kind = ErrorKind.REMOTE_COMPUTATION_FAILED

    def __init__(self, message: str, status: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.status = status


class EmptyResult(LegobotError):
    """结果内容为空"""

    kind = ErrorKind.EMPTY_RESULT

    def __init__(self, message: str, artifact_id: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.artifact_id = artifact_id
