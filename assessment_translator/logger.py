import logging
from pathlib import Path

LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Cache for log mode to avoid repeated config reads
_log_mode_cache = None


def _get_log_mode():
    """Get log mode from configuration."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    try:
        from assessment_translator.config import load_config
        config = load_config()
        log_mode = config.get('log_mode', 'off')
        _log_mode_cache = log_mode
        return log_mode
    except Exception:
        # Config module may still be importing; default to 'off'
        return 'off'


def _levels_for(log_mode: str):
    """Return (logger_level, console_level) for a log mode."""
    if log_mode == 'debug':
        return logging.DEBUG, logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables everything
        return logging.CRITICAL + 1, logging.CRITICAL + 1
    return logging.INFO, logging.INFO


def _file_handler(log_format: logging.Formatter) -> logging.FileHandler:
    LOG_DIR.mkdir(exist_ok=True)
    f_handler = logging.FileHandler(LOG_FILE)
    f_handler.setLevel(logging.DEBUG)
    f_handler.setFormatter(log_format)
    return f_handler


def _configure(logger: logging.Logger, log_mode: str) -> None:
    """Bring an already configured logger in line with the log mode."""
    logger_level, console_level = _levels_for(log_mode)
    logger.setLevel(logger_level)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    if log_mode != 'off' and not has_file_handler:
        logger.addHandler(_file_handler(logging.Formatter(LOG_FORMAT)))
    elif log_mode == 'off' and has_file_handler:
        handlers_to_remove = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        for handler in handlers_to_remove:
            handler.close()
            logger.removeHandler(handler)

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(console_level)


def _clear_log_mode_cache(log_mode=None):
    """
    Clear the log mode cache and update all existing loggers (call this when config is updated).

    When log_mode is given it is used as is instead of re-reading the config file.
    """
    global _log_mode_cache
    _log_mode_cache = log_mode

    log_mode = _get_log_mode()

    # Only loggers with handlers were created by get_logger
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        if logger.handlers:
            _configure(logger, log_mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    log_mode = _get_log_mode()

    # Prevent duplicate handlers if logger already configured
    if logger.handlers:
        _configure(logger, log_mode)
        return logger

    logger_level, console_level = _levels_for(log_mode)
    logger.setLevel(logger_level)

    log_format = logging.Formatter(LOG_FORMAT)
    if log_mode != 'off':
        logger.addHandler(_file_handler(log_format))

    # Console handler is always attached; its level follows the log mode
    c_handler = logging.StreamHandler()
    c_handler.setLevel(console_level)
    c_handler.setFormatter(log_format)
    logger.addHandler(c_handler)

    return logger
