"""
目录服务配置

配置值通过注入的读取函数获取（默认 os.getenv），便于测试时替换。
"""
import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

from dotenv import load_dotenv

from .exceptions import ValidationError
from .services.pagination import DEFAULT_PAGE_SIZE, DEFAULT_WINDOW_SIZE

# 加载 .env 环境变量
load_dotenv()

ConfigReader = Callable[[str], Optional[str]]

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class CatalogSettings:
    """目录服务配置"""
    database_url: str = "sqlite:///./catalog.db"
    sql_echo: bool = False
    default_page_size: int = DEFAULT_PAGE_SIZE
    page_window_size: int = DEFAULT_WINDOW_SIZE
    log_level: str = "INFO"


def _read_int(reader: ConfigReader, key: str, default: int) -> int:
    raw = reader(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"配置项 {key} 必须是整数: {raw!r}")
    if value < 1:
        raise ValidationError(f"配置项 {key} 必须大于0: {value}")
    return value


def load_settings(reader: ConfigReader = os.getenv) -> CatalogSettings:
    """从配置源读取设置"""
    defaults = CatalogSettings()
    return CatalogSettings(
        database_url=reader("CATALOG_DATABASE_URL") or defaults.database_url,
        sql_echo=(reader("CATALOG_SQL_ECHO") or "false").lower() == "true",
        default_page_size=_read_int(reader, "CATALOG_PAGE_SIZE", defaults.default_page_size),
        page_window_size=_read_int(reader, "CATALOG_PAGE_WINDOW", defaults.page_window_size),
        log_level=(reader("CATALOG_LOG_LEVEL") or defaults.log_level).upper(),
    )


def configure_logging(settings: CatalogSettings) -> None:
    """配置日志"""
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        raise ValidationError(f"未知的日志级别: {settings.log_level}")
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("catalog").setLevel(level)
