import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from colorama import just_fix_windows_console

from src.common.logging.filters import ComponentFilter
from src.common.logging.formatters import ColoredFormatter
from src.config import COUNT_FILES, MAX_BYTES, settings


ROOT_LOGGER = 'app'
LOG_FILE = 'working.log'
DATE_FORMAT = '%d-%m-%Y %H:%M:%S'
LOG_FORMAT = '%(asctime)s | %(levelname)s | {component} | %(message)s'

LEVEL_NAMES = {
    logging.WARNING: '⚠️ WARNING',
    logging.ERROR: '🛑 ERROR',
    logging.CRITICAL: '💀CRITICAL💀',
}


def _file_handler(logs_dir: Path) -> logging.Handler:
    logs_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        logs_dir / LOG_FILE,
        maxBytes=MAX_BYTES,
        backupCount=COUNT_FILES,
        encoding='utf-8',
    )
    handler.setFormatter(
        logging.Formatter(
            LOG_FORMAT.format(component='%(component_plain)s'),
            datefmt=DATE_FORMAT,
        ),
    )
    return handler


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ColoredFormatter(
            LOG_FORMAT.format(component='%(component_colored)s'),
            datefmt=DATE_FORMAT,
        ),
    )
    return handler


def configure_logging() -> logging.Logger:
    """Настраивает логгер приложения и возвращает его.

    Дочерние логгеры (app.booking, app.cache, ...) пишут через
    обработчики корневого app. Повторный вызов ничего не меняет.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return logger

    just_fix_windows_console()
    for level, name in LEVEL_NAMES.items():
        logging.addLevelName(level, name)

    # Фильтр висит на обработчиках: записи дочерних логгеров
    # доходят до них через propagate, минуя фильтры самого app
    component_filter = ComponentFilter()
    for handler in (
        _file_handler(Path(settings.logging.DIR)),
        _console_handler(),
    ):
        handler.addFilter(component_filter)
        logger.addHandler(handler)

    logger.setLevel(settings.logging.LEVEL.upper())
    logger.propagate = False
    return logger


logger = configure_logging()
