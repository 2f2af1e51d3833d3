"""
Logger Configuration
统一日志配置
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler
from rich.console import Console


# 全局 Console 实例
console = Console()

# 日志格式
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

# 默认日志目录
LOG_DIR = Path(__file__).parent.parent / "logs"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    use_rich: bool = True,
) -> logging.Logger:
    """
    设置日志记录器

    模块内统一使用 ``logging.getLogger(__name__)``，入口处只需配置根记录器
    (name=None)，所有模块日志会向上传播。

    Args:
        name: 日志记录器名称 (None 表示根记录器)
        level: 日志级别 (int 或 "DEBUG" 等名称)
        log_file: 日志文件名 (可选，写入 logs/ 目录)
        use_rich: 是否使用 Rich 美化输出

    Returns:
        配置好的 Logger 实例
    """
    level = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 避免重复添加 handler
    if logger.handlers:
        return logger

    # Console Handler
    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    # File Handler (可选)
    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_path = LOG_DIR / log_file

        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger
