"""Centralized logging configuration for the security system."""

import logging
import logging.handlers
import os
import sys
from typing import Optional, Dict, Any
from pathlib import Path

from .config.defaults import SYSTEM_CONSTANTS

LOGGER_PREFIX = "catpoint"
AUDIT_LOGGER_NAME = f"{LOGGER_PREFIX}.audit"


class StructuredFormatter(logging.Formatter):
    """Custom formatter that adds structured information to log records."""

    def __init__(self, include_context: bool = True):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured information."""
        base_format = "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s"

        if self.include_context and hasattr(record, 'context'):
            context_str = " | ".join([f"{k}={v}" for k, v in record.context.items()])
            base_format += f" | Context: {context_str}"

        if record.levelno >= logging.ERROR and record.exc_info:
            base_format += " | %(pathname)s:%(lineno)d"

        formatter = logging.Formatter(base_format)
        return formatter.format(record)


class ContextFilter(logging.Filter):
    """Filter that adds component and process information to log records."""

    def __init__(self, component_name: Optional[str] = None):
        super().__init__()
        self.component_name = component_name
        self.process_id = os.getpid()

    def filter(self, record: logging.LogRecord) -> bool:
        record.process_id = self.process_id
        if self.component_name:
            record.component = self.component_name
        return True


class LoggingManager:
    """Installs handlers for the ``catpoint`` logger hierarchy."""

    def __init__(self, log_dir: str = "logs", log_level: int = logging.INFO,
                 console: bool = True):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_log_file = self.log_dir / "catpoint.log"
        self.error_log_file = self.log_dir / "errors.log"
        self.audit_log_file = self.log_dir / "audit.log"

        self.log_level = log_level
        self.max_log_size = SYSTEM_CONSTANTS["LOG_ROTATION_SIZE_MB"] * 1024 * 1024
        self.backup_count = SYSTEM_CONSTANTS["LOG_BACKUP_COUNT"]
        self.console = console

        self._setup_package_logger()
        self._setup_audit_logger()

    def _setup_package_logger(self) -> None:
        """Setup handlers on the package root logger."""
        package_logger = logging.getLogger(LOGGER_PREFIX)
        package_logger.setLevel(self.log_level)
        self._close_handlers(package_logger)

        if self.console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.log_level)
            console_handler.setFormatter(StructuredFormatter(include_context=False))
            package_logger.addHandler(console_handler)

        main_file_handler = logging.handlers.RotatingFileHandler(
            self.main_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        main_file_handler.setLevel(logging.DEBUG)
        main_file_handler.setFormatter(StructuredFormatter(include_context=True))
        package_logger.addHandler(main_file_handler)

        # Errors and critical only
        error_file_handler = logging.handlers.RotatingFileHandler(
            self.error_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(StructuredFormatter(include_context=True))
        package_logger.addHandler(error_file_handler)

    def _setup_audit_logger(self) -> None:
        """Audit records go to their own file as well as the main log."""
        audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
        audit_logger.setLevel(logging.INFO)
        self._close_handlers(audit_logger)

        audit_handler = logging.handlers.RotatingFileHandler(
            self.audit_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        audit_handler.setLevel(logging.INFO)
        audit_handler.setFormatter(logging.Formatter("%(asctime)s | %(message)s"))
        audit_logger.addHandler(audit_handler)

    @staticmethod
    def _close_handlers(logger: logging.Logger) -> None:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def shutdown(self) -> None:
        """Detach and close every handler this manager installed."""
        self._close_handlers(logging.getLogger(LOGGER_PREFIX))
        self._close_handlers(logging.getLogger(AUDIT_LOGGER_NAME))


logging_manager: Optional[LoggingManager] = None
_component_loggers: Dict[str, logging.Logger] = {}


def get_logger(component_name: str) -> logging.Logger:
    """Get the ``catpoint.<component>`` logger, creating it on first use."""
    if component_name in _component_loggers:
        return _component_loggers[component_name]

    logger = logging.getLogger(f"{LOGGER_PREFIX}.{component_name}")
    logger.addFilter(ContextFilter(component_name))
    _component_loggers[component_name] = logger
    return logger


def log_audit(message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Record a security-relevant state change in the audit log."""
    if details:
        detail_str = " | ".join([f"{k}={v}" for k, v in details.items()])
        message = f"{message} | {detail_str}"

    logging.getLogger(AUDIT_LOGGER_NAME).info(message)


def setup_logging(log_level: str = "INFO", log_dir: str = "logs",
                  console: bool = True) -> LoggingManager:
    """Setup centralized logging system."""
    global logging_manager

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if logging_manager is not None:
        logging_manager.shutdown()

    logging_manager = LoggingManager(log_dir, numeric_level, console=console)
    get_logger("logging").info(f"Logging initialized (level={log_level}, dir={log_dir})")
    return logging_manager
