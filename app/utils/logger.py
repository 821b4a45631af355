"""
日志工具

所有模块的 logger 都挂在包根 logger "app" 下，处理器只在根上配置一次，
子 logger 通过冒泡输出，不会因为模块多次导入而重复打印。
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from app.config import settings

ROOT_LOGGER_NAME = "app"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """配置包根 logger，已经配置过时直接返回"""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers:
        return root

    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    root.setLevel(log_level)
    root.propagate = False
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    log_file = settings.LOG_FILE if log_file is None else log_file
    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            root.warning(f"⚠️ [LOGGER] 文件日志配置失败，仅输出到控制台: {e}")

    # httpx 每个请求都会打一条 INFO，会淹没业务日志
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """获取包根下的 logger，"api" → "app.api"，"app.services.x" 保持不变"""
    configure_logging()
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
