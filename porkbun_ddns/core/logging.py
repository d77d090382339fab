"""
Логирование Porkbun DDNS.

Каждая запись лога может нести поля записи DNS: domain, record_type,
operation, address, а также run_id текущего цикла.

Два формата:
- Human-readable для консоли (docker logs)
- JSON для файлов и log aggregation (Loki, ELK), а также для консоли с --json-logs

Пример использования:
    from porkbun_ddns.core.logging import setup_logging_from_config, get_logger

    setup_logging_from_config(config.logging)

    logger = get_logger(__name__)
    log = logger.bind(domain="home.example.com", record_type="A")
    log.info("Запись обновлена", operation="edit")

Формат вывода (human):
    2025-12-27 10:30:15 - INFO     - [2025-12-27T10-30-00] home.example.com/A: Запись обновлена (operation=edit)

Формат вывода (JSON):
    {"timestamp": "2025-12-27T10:30:15.123456", "level": "INFO", "logger": "porkbun_ddns.sync.records",
     "message": "Запись обновлена", "run_id": "2025-12-27T10-30-00",
     "domain": "home.example.com", "record_type": "A", "operation": "edit"}
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from .config_schema import LoggingConfig, RotationType

# Поля записи DNS, которые StructuredLogger кладёт в LogRecord
RECORD_FIELDS = ("domain", "record_type", "operation", "address")


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        name: getattr(record, name)
        for name in RECORD_FIELDS
        if getattr(record, name, None)
    }


class JSONFormatter(logging.Formatter):
    """Одна строка JSON на запись: уровень, сообщение, run_id и поля записи DNS."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        run_id = getattr(record, "run_id", None)
        if run_id:
            data["run_id"] = run_id
        data.update(_record_fields(record))

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """
    Формат: TIMESTAMP - LEVEL - [run_id] domain/record_type: MESSAGE (operation=X, address=Y)
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        fields = _record_fields(record)

        run_id = getattr(record, "run_id", None)
        prefix = f"[{run_id}] " if run_id else ""

        domain = fields.pop("domain", None)
        record_type = fields.pop("record_type", None)
        if domain and record_type:
            prefix += f"{domain}/{record_type}: "
        elif domain or record_type:
            prefix += f"{domain or record_type}: "

        suffix = ""
        if fields:
            suffix = " (" + ", ".join(f"{k}={v}" for k, v in fields.items()) + ")"

        result = f"{timestamp} - {record.levelname.ljust(8)} - {prefix}{record.getMessage()}{suffix}"
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


class StructuredLogger:
    """
    Обёртка над logging.Logger с полями записи DNS.

        logger.info("Запись создана", domain="example.com", record_type="A")
    """

    def __init__(self, name: str, default_extra: Optional[Dict[str, Any]] = None):
        self._logger = logging.getLogger(name)
        self._default_extra = default_extra or {}

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        extra = {**self._default_extra, **kwargs}

        # run_id из контекста цикла если не указан явно
        if "run_id" not in extra:
            from .context import get_current_context
            ctx = get_current_context()
            if ctx:
                extra["run_id"] = ctx.run_id

        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log ERROR с traceback."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """
        Логгер для одной записи DNS.

        Example:
            log = logger.bind(domain="example.com", record_type="AAAA")
            log.info("Запись актуальна")
        """
        return StructuredLogger(self._logger.name, default_extra={**self._default_extra, **kwargs})


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Получает или создаёт StructuredLogger (обычно get_logger(__name__))."""
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def _file_handler(config: LoggingConfig) -> logging.Handler:
    """File handler с ротацией по config.rotation."""
    path = Path(config.file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if config.rotation == RotationType.SIZE:
        return logging.handlers.RotatingFileHandler(
            path, maxBytes=config.max_bytes, backupCount=config.backup_count, encoding="utf-8",
        )
    if config.rotation == RotationType.TIME:
        return logging.handlers.TimedRotatingFileHandler(
            path, when=config.when, interval=config.interval,
            backupCount=config.backup_count, encoding="utf-8",
        )
    return logging.FileHandler(path, encoding="utf-8")


def setup_logging_from_config(
    config: LoggingConfig,
    console_json: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Настраивает корневой логгер.

    Консоль human-readable (или JSON при console_json), файл в формате
    config.json_format.

    Args:
        config: Секция logging конфигурации
        console_json: JSON на консоли (флаг --json-logs)
        stream: Поток для консоли (по умолчанию sys.stderr)
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    level = getattr(logging, config.level)
    handlers = []

    if config.console:
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setFormatter(JSONFormatter() if console_json else HumanFormatter())
        handlers.append(console_handler)

    if config.file_path:
        file_handler = _file_handler(config)
        file_handler.setFormatter(JSONFormatter() if config.json_format else HumanFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
