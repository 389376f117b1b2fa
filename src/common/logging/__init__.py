from src.common.logging.config import configure_logging, logger
from src.common.logging.decorators import log_action


__all__ = [
    'configure_logging',
    'logger',
    'log_action',
]
