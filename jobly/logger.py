"""
Structured logging system for Jobly.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for monitoring store activity.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks statement and repository-operation metrics.
    """

    def __init__(
        self,
        name: str = "jobly",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "statements_executed": 0,
            "statements_failed": 0,
            "operations": {},
            "errors_by_kind": {},
        }

        if enable_console:
            # stdout is reserved for command output
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobly_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_statement(self):
        """Increment executed statement counter."""
        self.metrics["statements_executed"] += 1

    def record_statement_failure(self):
        self.metrics["statements_failed"] += 1

    def record_operation(self, resource: str, operation: str):
        """Record a repository operation against a resource."""
        per_resource = self.metrics["operations"].setdefault(resource, {})
        per_resource[operation] = per_resource.get(operation, 0) + 1

    def record_error(self, kind: str):
        """Record a domain error by kind."""
        if kind not in self.metrics["errors_by_kind"]:
            self.metrics["errors_by_kind"][kind] = 0
        self.metrics["errors_by_kind"][kind] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = self.metrics.copy()
        metrics_copy["operations_total"] = sum(
            sum(ops.values()) for ops in metrics_copy["operations"].values()
        )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        executed = metrics["statements_executed"]
        failed = metrics["statements_failed"]
        failure_rate = 0
        if executed > 0:
            failure_rate = round(failed / executed * 100, 1)

        self.info("=== Store Session Metrics ===")
        self.info(f"Statements: {executed} executed, {failed} failed ({failure_rate}%)")
        self.info(f"Operations: {metrics['operations_total']}")

        if metrics["operations"]:
            self.info("Operations by resource:")
            for resource, ops in metrics["operations"].items():
                summary = ", ".join(f"{op}={count}" for op, count in sorted(ops.items()))
                self.info(f"  {resource}: {summary}")

        if metrics["errors_by_kind"]:
            self.info("Error Kinds:")
            for kind, count in metrics["errors_by_kind"].items():
                self.info(f"  {kind}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobly",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
