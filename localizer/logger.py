import logging
import os
from pathlib import Path

LOG_DIR = Path(os.environ.get("LOCALIZER_LOG_DIR", Path(__file__).parent.parent / "logs"))
LOG_FILE = LOG_DIR / "app.log"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_SILENT = logging.CRITICAL + 1

# Cache for log mode to avoid re-reading localizer.json on every get_logger call
_log_mode_cache = None
_managed_loggers = set()


def _get_log_mode():
    """Get log mode ('off', 'info' or 'debug') from configuration."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    try:
        from localizer.config import load_config
        config = load_config()
        log_mode = config.get('log_mode', 'info')
    except Exception:
        # Logging must work before a project is configured
        return 'info'
    if log_mode not in ('off', 'info', 'debug'):
        log_mode = 'info'
    _log_mode_cache = log_mode
    return log_mode


def _levels_for(log_mode):
    if log_mode == 'debug':
        return logging.DEBUG, logging.DEBUG
    if log_mode == 'off':
        return _SILENT, _SILENT
    return logging.INFO, logging.INFO


def _apply_log_mode(logger: logging.Logger, log_mode: str) -> None:
    """Bring a logger's level and handlers in line with the log mode."""
    logger_level, console_level = _levels_for(log_mode)
    logger.setLevel(logger_level)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    if log_mode != 'off' and not file_handlers:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        f_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
        f_handler.setLevel(logging.DEBUG)
        f_handler.setFormatter(formatter)
        logger.addHandler(f_handler)
    elif log_mode == 'off':
        for handler in file_handlers:
            handler.close()
            logger.removeHandler(handler)

    console_handlers = [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    if not console_handlers:
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(formatter)
        logger.addHandler(c_handler)
        console_handlers = [c_handler]
    for handler in console_handlers:
        handler.setLevel(console_level)


def _clear_log_mode_cache():
    """Clear the cached log mode and re-level every logger handed out by get_logger."""
    global _log_mode_cache
    _log_mode_cache = None

    log_mode = _get_log_mode()
    for logger_name in sorted(_managed_loggers):
        _apply_log_mode(logging.getLogger(logger_name), log_mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    _apply_log_mode(logger, _get_log_mode())
    _managed_loggers.add(name)
    return logger
