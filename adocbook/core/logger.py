"""
Logging and Error Handling

Centralized logging configuration and error tracking for the adocbook
build pipeline.
"""

import logging
import logging.handlers
import os
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any


APP_NAME = "adocbook"


class BookLogger:
    """
    Centralized logging system for adocbook.

    Console output for progress lines, a rotating debug log, and a separate
    rotating log that only collects errors.
    """

    def __init__(self, log_dir: str = "logs", app_name: str = APP_NAME):
        """
        Initialize the logging system.

        Args:
            log_dir: Directory to store log files
            app_name: Name of the root application logger
        """
        self.log_dir = Path(log_dir)
        self.app_name = app_name
        self.loggers: Dict[str, logging.Logger] = {}

        self.log_dir.mkdir(parents=True, exist_ok=True)

    def setup_logger(self, level: int = logging.INFO) -> logging.Logger:
        """
        Attach console and file handlers to the application logger.

        Args:
            level: Console logging level (default: INFO)

        Returns:
            Configured logger instance
        """
        logger = logging.getLogger(self.app_name)
        logger.setLevel(logging.DEBUG)

        # Re-initializing replaces handlers instead of duplicating them
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        detailed_formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%H:%M:%S'
        )

        file_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{self.app_name}.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(console_formatter)

        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{self.app_name}_errors.log",
            maxBytes=5*1024*1024,  # 5MB
            backupCount=3,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        logger.addHandler(error_handler)

        self.loggers['main'] = logger
        return logger

    def get_logger(self, name: str) -> logging.Logger:
        """Return the child logger '<app_name>.<name>'."""
        full_name = f"{self.app_name}.{name}"
        if full_name not in self.loggers:
            self.loggers[full_name] = logging.getLogger(full_name)
        return self.loggers[full_name]

    def log_system_info(self):
        """Log interpreter and working-directory details for debugging."""
        logger = self.get_logger('system')
        logger.debug("=== adocbook started ===")
        logger.debug(f"Python version: {sys.version}")
        logger.debug(f"Platform: {sys.platform}")
        logger.debug(f"Working directory: {os.getcwd()}")
        logger.debug(f"Log directory: {self.log_dir.absolute()}")


class ErrorTracker:
    """
    Records errors caught at the top of the pipeline so a run can report
    what went wrong without re-raising.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.errors: list = []

    def log_error(self, error: Exception, context: str = None) -> str:
        """
        Log an error with its context and keep it for the run summary.

        Returns:
            Error ID for tracking
        """
        error_id = f"ERR_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{len(self.errors):03d}"

        self.errors.append({
            'id': error_id,
            'timestamp': datetime.now(),
            'type': type(error).__name__,
            'message': str(error),
            'context': context,
            'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__)),
        })

        log_message = f"[{error_id}] {type(error).__name__}: {error}"
        if context:
            log_message += f" (Context: {context})"
        self.logger.error(log_message)
        self.logger.debug(f"[{error_id}] Full traceback:\n{self.errors[-1]['traceback']}")

        return error_id

    def get_error_summary(self) -> Dict[str, Any]:
        """Counts of tracked errors by exception type."""
        type_counts: Dict[str, int] = {}
        for error in self.errors:
            type_counts[error['type']] = type_counts.get(error['type'], 0) + 1
        return {
            'total_errors': len(self.errors),
            'error_types': type_counts,
            'recent_errors': self.errors[-5:],
        }


_logger_instance: Optional[BookLogger] = None


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Name of the module/component (optional)

    Returns:
        Logger instance
    """
    global _logger_instance

    if _logger_instance is None:
        _logger_instance = BookLogger()
        _logger_instance.setup_logger()

    if name:
        return _logger_instance.get_logger(name)
    return logging.getLogger(_logger_instance.app_name)


def initialize_logging(log_dir: str = "logs", level: int = logging.INFO) -> logging.Logger:
    """
    Initialize the global logging system.

    Args:
        log_dir: Directory for log files
        level: Console logging level
    """
    global _logger_instance
    _logger_instance = BookLogger(log_dir)
    logger = _logger_instance.setup_logger(level)
    _logger_instance.log_system_info()
    return logger


def create_error_tracker(logger_name: str = None) -> ErrorTracker:
    """Create an ErrorTracker bound to the named logger."""
    return ErrorTracker(get_logger(logger_name))
