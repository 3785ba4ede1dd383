import logging
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Cache for log mode to avoid repeated environment reads
_log_mode_cache: Optional[str] = None

# Names of loggers created through get_logger()
_managed_loggers = set()


def _get_log_mode() -> str:
    """Get log mode from the environment ('debug', 'info' or 'off')."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    log_mode = os.environ.get('AUTOLOCALE_LOG_MODE', 'info').strip().lower()
    if log_mode not in ('debug', 'info', 'off'):
        log_mode = 'info'
    _log_mode_cache = log_mode
    return log_mode


def _get_log_file() -> Optional[str]:
    return os.environ.get('AUTOLOCALE_LOG_FILE') or None


def _levels_for(log_mode: str):
    if log_mode == 'debug':
        return logging.DEBUG, logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables everything
        return logging.CRITICAL + 1, logging.CRITICAL + 1
    return logging.INFO, logging.INFO


def _apply_mode(logger: logging.Logger, log_mode: str):
    """Set levels and file handler on a logger according to log_mode."""
    logger_level, console_level = _levels_for(log_mode)
    logger.setLevel(logger_level)

    log_format = logging.Formatter(LOG_FORMAT)
    log_file = _get_log_file()
    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    if log_mode != 'off' and log_file and not has_file_handler:
        f_handler = logging.FileHandler(log_file)
        f_handler.setLevel(logging.DEBUG)
        f_handler.setFormatter(log_format)
        logger.addHandler(f_handler)
    elif log_mode == 'off' and has_file_handler:
        handlers_to_remove = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        for handler in handlers_to_remove:
            handler.close()
            logger.removeHandler(handler)

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(console_level)


def set_log_mode(log_mode: Optional[str] = None):
    """
    Change the log mode and update all loggers created by get_logger().

    Passing None clears the cached mode so it is re-read from the environment.
    """
    global _log_mode_cache
    _log_mode_cache = log_mode.lower() if log_mode else None
    mode = _get_log_mode()

    for logger_name in list(_managed_loggers):
        _apply_mode(logging.getLogger(logger_name), mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    log_mode = _get_log_mode()

    # Prevent duplicate handlers if logger already configured
    if name in _managed_loggers:
        _apply_mode(logger, log_mode)
        return logger

    c_handler = logging.StreamHandler()
    c_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(c_handler)
    _managed_loggers.add(name)

    _apply_mode(logger, log_mode)
    return logger
