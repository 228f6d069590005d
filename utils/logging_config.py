"""Structured logging configuration for Today"""
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

APP_LOGGER = 'today'


class JSONFormatter(logging.Formatter):
    """Одна JSON запись на строку лог-файла"""

    # Поля, передаваемые через extra=
    CONTEXT_FIELDS = ('task_id', 'id_prefix', 'operation', 'duration_ms', 'path', 'line_number', 'column')

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'ts': datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'where': f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(
            (key, getattr(record, key)) for key in self.CONTEXT_FIELDS if hasattr(record, key)
        )
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class LevelColorFormatter(logging.Formatter):
    """Консольный формат: уровень подсвечен ANSI цветом"""

    LEVEL_COLORS = {
        logging.DEBUG: 36,
        logging.INFO: 32,
        logging.WARNING: 33,
        logging.ERROR: 31,
        logging.CRITICAL: 35,
    }

    def formatMessage(self, record: logging.LogRecord) -> str:
        # Запись общая для всех обработчиков, поэтому её поля не меняем
        code = self.LEVEL_COLORS.get(record.levelno)
        text = super().formatMessage(record)
        if code is None:
            return text
        return text.replace(record.levelname, f"\033[{code}m{record.levelname}\033[0m", 1)


def _file_handler(path: Path, level: Union[int, str]) -> logging.Handler:
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    log_dir: Optional[Path] = None,
    level: Union[int, str] = logging.WARNING,
    json_output: bool = True,
    console_output: bool = True
) -> logging.Logger:
    """
    Настройка логгера приложения

    stdout занят выводом задач, поэтому консольные сообщения идут в stderr.

    Args:
        log_dir: Каталог JSON логов (None - без файлов)
        level: Уровень логирования
        json_output: Писать JSON логи, если задан log_dir
        console_output: Писать в консоль (stderr)

    Returns:
        Логгер 'today'
    """
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(LevelColorFormatter(
            '%(asctime)s %(levelname)s %(name)s: %(message)s', datefmt='%H:%M:%S'
        ))
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    if json_output and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        stamp = f"{datetime.now():%Y%m%d}"
        logger.addHandler(_file_handler(log_dir / f'today_{stamp}.log', level))
        # Отдельный файл только для ошибок
        logger.addHandler(_file_handler(log_dir / f'errors_{stamp}.log', logging.ERROR))

    return logger


def get_logger(name: str) -> logging.Logger:
    """Дочерний логгер: today.<name>"""
    return logging.getLogger(f'{APP_LOGGER}.{name}')


class LogTimer:
    """
    Замер длительности операции.

    Исключение не подавляется и в лог попадает только на уровне debug:
    сообщать о нём пользователю - забота того, кто его обработает.
    """

    def __init__(self, logger: logging.Logger, operation: str, **extra):
        self.logger = logger
        self.operation = operation
        self.extra = extra
        self.started = None

    def __enter__(self):
        self.started = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed_ms = (datetime.now() - self.started).total_seconds() * 1000
        extra = dict(self.extra, operation=self.operation, duration_ms=round(elapsed_ms, 2))

        if exc_type is None:
            self.logger.debug(f"{self.operation} took {elapsed_ms:.0f}ms", extra=extra)
        else:
            self.logger.debug(
                f"{self.operation} failed after {elapsed_ms:.0f}ms: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
                extra=extra
            )
        return False
