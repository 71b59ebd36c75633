"""Logging setup for the security system.

Every module logs through ``get_logger(component)``, which hands out loggers
under the ``catpoint`` namespace. Nothing is attached to the root logger until
``setup_logging`` runs, so embedding applications keep control of their own
handlers.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any

LOGGER_NAMESPACE = "catpoint"
PERFORMANCE_LOGGER = f"{LOGGER_NAMESPACE}.performance"

_BASE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
_LOCATION_SUFFIX = " | %(pathname)s:%(lineno)d"


class StructuredFormatter(logging.Formatter):
    """Pipe-separated formatter.

    Records logged with ``extra={"context": {...}}`` get the context appended
    as ``key=value`` pairs. Errors carrying exception info also get the
    source location.
    """

    def __init__(self, include_context: bool = True):
        super().__init__(_BASE_FORMAT)
        self.include_context = include_context
        self._error_formatter = logging.Formatter(_BASE_FORMAT + _LOCATION_SUFFIX)

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.ERROR and record.exc_info:
            output = self._error_formatter.format(record)
        else:
            output = super().format(record)

        context = getattr(record, "context", None)
        if self.include_context and context:
            pairs = " | ".join(f"{key}={value}" for key, value in context.items())
            output = f"{output} | Context: {pairs}"

        return output


class ContextFilter(logging.Filter):
    """Tags records with the component that logged them."""

    def __init__(self, component_name: str):
        super().__init__()
        self.component_name = component_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.component = self.component_name
        return True


class LoggingManager:
    """Owns the component loggers and, once configured, the root handlers."""

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = Path(log_dir) if log_dir else None

        self.log_level = logging.INFO
        self.max_log_size = 10 * 1024 * 1024  # 10MB
        self.backup_count = 5

        self.component_loggers: Dict[str, logging.Logger] = {}
        self.configured = False

    @property
    def main_log_file(self) -> Optional[Path]:
        return self.log_dir / "security.log" if self.log_dir else None

    @property
    def error_log_file(self) -> Optional[Path]:
        return self.log_dir / "errors.log" if self.log_dir else None

    @property
    def performance_log_file(self) -> Optional[Path]:
        return self.log_dir / "performance.log" if self.log_dir else None

    def _rotating_handler(self, path: Path, level: int,
                          formatter: logging.Formatter) -> logging.Handler:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=self.max_log_size, backupCount=self.backup_count
        )
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler

    def configure(self) -> None:
        """Replace the root handlers with a console handler and, when a log
        directory is set, rotating main and error files."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(StructuredFormatter(include_context=False))
        root_logger.addHandler(console_handler)

        if self.log_dir is not None:
            root_logger.addHandler(self._rotating_handler(
                self.main_log_file, logging.DEBUG, StructuredFormatter()))
            root_logger.addHandler(self._rotating_handler(
                self.error_log_file, logging.ERROR, StructuredFormatter()))

        self.configured = True
        logging.getLogger(LOGGER_NAMESPACE).info(
            f"Logging configured (level={logging.getLevelName(self.log_level)}, "
            f"log_dir={self.log_dir})"
        )

    def get_component_logger(self, component_name: str) -> logging.Logger:
        """Return the ``catpoint.<component_name>`` logger, creating it once."""
        logger = self.component_loggers.get(component_name)
        if logger is None:
            logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{component_name}")
            logger.addFilter(ContextFilter(component_name))
            self.component_loggers[component_name] = logger
        return logger

    def get_performance_logger(self) -> logging.Logger:
        logger = self.component_loggers.get(PERFORMANCE_LOGGER)
        if logger is None:
            logger = logging.getLogger(PERFORMANCE_LOGGER)
            if self.log_dir is not None:
                logger.addHandler(self._rotating_handler(
                    self.performance_log_file, logging.INFO,
                    logging.Formatter("%(asctime)s | %(message)s")))
            self.component_loggers[PERFORMANCE_LOGGER] = logger
        return logger

    def set_log_level(self, level: int) -> None:
        self.log_level = level
        logging.getLogger().setLevel(level)

        for logger in self.component_loggers.values():
            logger.setLevel(level)


logging_manager = LoggingManager()


def get_logger(component_name: str) -> logging.Logger:
    return logging_manager.get_component_logger(component_name)


def log_performance(message: str, metrics: Optional[Dict[str, Any]] = None) -> None:
    """Log a timing or counter line to ``catpoint.performance``."""
    if metrics:
        message = message + " | " + " | ".join(f"{k}={v}" for k, v in metrics.items())

    logging_manager.get_performance_logger().info(message)


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None) -> LoggingManager:
    """Configure root logging and make the new manager the global one.

    Loggers already handed out by ``get_logger`` stay registered.
    """
    global logging_manager

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    perf_logger = logging.getLogger(PERFORMANCE_LOGGER)
    for handler in list(perf_logger.handlers):
        perf_logger.removeHandler(handler)
        handler.close()

    new_manager = LoggingManager(log_dir)
    new_manager.component_loggers = {
        name: logger for name, logger in logging_manager.component_loggers.items()
        if name != PERFORMANCE_LOGGER
    }
    new_manager.log_level = numeric_level
    new_manager.configure()
    new_manager.set_log_level(numeric_level)

    logging_manager = new_manager
    return logging_manager
