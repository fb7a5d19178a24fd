"""日志配置模块."""

import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from docfill.config.settings import LogConfig, settings


def resolve_log_path(log_file: str, output_dir: Path) -> Path:
    """相对路径的日志文件放在输出目录下，绝对路径原样使用."""
    path = Path(log_file)
    return path if path.is_absolute() else output_dir / path


def setup_logger(config: Optional[LogConfig] = None, output_dir: Optional[Path] = None) -> List[int]:
    """配置日志系统.

    清除已有的处理器，添加控制台输出；LOG_FILE 非空时再添加带轮转的文件输出。

    Args:
        config: 日志配置，默认使用全局配置
        output_dir: 相对日志文件所在目录，默认使用全局输出目录

    Returns:
        新添加的处理器 id，可用于 logger.remove
    """
    config = config or settings.log
    output_dir = output_dir or settings.output_dir

    logger.remove()
    handler_ids = [
        logger.add(sys.stderr, format=config.format, level=config.level, colorize=True)
    ]

    if config.log_file:
        log_path = resolve_log_path(config.log_file, output_dir)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                log_path,
                format=config.format,
                level=config.level,
                rotation=config.rotation,
                retention=config.retention,
                encoding="utf-8",
            )
        )
        logger.debug(f"日志文件: {log_path}")

    logger.debug(f"日志系统已初始化，级别：{config.level}")
    return handler_ids
