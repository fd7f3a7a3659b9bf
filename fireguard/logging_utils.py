import logging

from fireguard.logging_handlers import build_handlers

# Set by enable_debug_logging(); applies to loggers created afterwards too
_debug_all = False

def setup_logger(name, debug=False, verbose=True):
    """
    Setup unified logger with a fixed datetime format.

    Structured format: timestamp - level - module - message.
    Handlers are installed once per logger name; later calls return the
    existing logger untouched.

    Args:
        name: Logger name (typically __name__)
        debug: Enable debug level logging
        verbose: Enable log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    debug = debug or _debug_all
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    # Prevent double logging via root logger
    logger.propagate = False

    handlers = build_handlers(verbose=verbose, debug=debug)
    if handlers:
        formatter = logging.Formatter(
            fmt='%(asctime)s [%(levelname)-8s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    return logger

def enable_debug_logging(prefix="fireguard"):
    """
    Switch every logger under prefix to DEBUG level.

    Module-level loggers are created at import time at INFO level, so a
    --debug flag has to reach them here rather than through setup_logger.
    """
    global _debug_all
    _debug_all = True
    for name, existing in list(logging.Logger.manager.loggerDict.items()):
        if isinstance(existing, logging.Logger) and (name == prefix or name.startswith(prefix + ".")):
            existing.setLevel(logging.DEBUG)

def log_info(logger, message):
    """Consistent info logging"""
    logger.info(f"ℹ️  {message}")

def log_success(logger, message):
    """Consistent success logging"""
    logger.info(f"✅ {message}")

def log_warning(logger, message):
    """Consistent warning logging"""
    logger.warning(f"⚠️  {message}")

def log_error(logger, message):
    """Consistent error logging"""
    logger.error(f"❌ {message}")

def log_debug(logger, message):
    """Consistent debug logging"""
    logger.debug(f"🔍 {message}")

def log_audio(logger, message):
    """Consistent audio logging"""
    logger.info(f"🎵 {message}")

def log_alarm(logger, message):
    """Consistent alarm logging"""
    logger.info(f"🚨 {message}")
