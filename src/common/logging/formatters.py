import logging

from colorama import Fore, Style


LEVEL_COLORS = {
    logging.DEBUG: Fore.WHITE,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.MAGENTA,
}


class ColoredFormatter(logging.Formatter):
    """Консольный форматтер: имя уровня окрашивается по LEVEL_COLORS."""

    def format(self, record: logging.LogRecord) -> str:
        # Запись общая для файлового и консольного обработчиков,
        # поэтому levelname возвращается после форматирования
        plain = record.levelname
        color = LEVEL_COLORS.get(record.levelno, Fore.WHITE)
        record.levelname = f'{color}{plain}{Style.RESET_ALL}'
        try:
            return super().format(record)
        finally:
            record.levelname = plain
