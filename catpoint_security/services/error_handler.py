"""Error taxonomy and error tracking for the security system.

Collaborator failures are recorded and then re-raised unchanged. The security
service never retries and never falls back to a degraded mode; resilience
belongs to the caller or to the repository implementation.
"""

import functools
import threading
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from ..logging_config import get_logger

logger = get_logger("error_handler")


class SecurityServiceError(Exception):
    """Base class for security system errors."""


class InvalidInputError(SecurityServiceError, ValueError):
    """An argument violated a precondition."""


class SensorNotFoundError(InvalidInputError):
    """The sensor is not known to the repository."""

    def __init__(self, sensor: Any):
        self.sensor = sensor
        super().__init__(f"sensor not found: {sensor!r}")


class ClassifierError(SecurityServiceError):
    """The image classifier could not evaluate an image."""


class RepositoryError(SecurityServiceError):
    """The backing store failed to read or write."""


class ErrorSeverity(Enum):
    """How serious a recorded failure is."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorRecord:
    """One recorded failure."""
    component_name: str
    error: Exception
    severity: ErrorSeverity
    timestamp: datetime = field(default_factory=datetime.now)
    traceback_str: str = ""

    @property
    def error_type(self) -> str:
        return type(self.error).__name__


class ErrorHandler:
    """Records errors raised by components. Never swallows them."""

    def __init__(self, max_error_history: int = 1000):
        self.max_error_history = max_error_history
        self.error_records: List[ErrorRecord] = []
        self.component_error_counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def register_component(self, component_name: str) -> None:
        """Register a component for error tracking."""
        with self._lock:
            self.component_error_counts.setdefault(component_name, 0)
        logger.debug(f"Component registered: {component_name}")

    def handle_error(self, component_name: str, error: Exception,
                     severity: ErrorSeverity = ErrorSeverity.MEDIUM) -> ErrorRecord:
        """Record an error from a component and return the record."""
        error_record = ErrorRecord(
            component_name=component_name,
            error=error,
            severity=severity,
            traceback_str=traceback.format_exc()
        )

        with self._lock:
            self.error_records.append(error_record)
            if len(self.error_records) > self.max_error_history:
                self.error_records = self.error_records[-self.max_error_history:]

            self.component_error_counts[component_name] = \
                self.component_error_counts.get(component_name, 0) + 1

        logger.error(f"Error in {component_name}: {error} (Severity: {severity.value})")
        return error_record

    def get_error_stats(self) -> Dict[str, Any]:
        """Totals per component since the last reset."""
        with self._lock:
            return {
                "total_errors": len(self.error_records),
                "component_error_counts": dict(self.component_error_counts)
            }

    def reset_error_counts(self, component_name: Optional[str] = None) -> None:
        """Zero the count for one component, or for every component when none is given."""
        with self._lock:
            if component_name is None:
                self.component_error_counts = dict.fromkeys(self.component_error_counts, 0)
            elif component_name in self.component_error_counts:
                self.component_error_counts[component_name] = 0

    def get_error_summary(self, hours: int = 24) -> Dict[str, Any]:
        """Count recent failures by component and severity."""
        cutoff_time = datetime.now() - timedelta(hours=hours)

        with self._lock:
            recent_errors = [e for e in self.error_records if e.timestamp >= cutoff_time]

        component_counts: Dict[str, int] = {}
        severity_counts = {severity.value: 0 for severity in ErrorSeverity}

        for error in recent_errors:
            component_counts[error.component_name] = component_counts.get(error.component_name, 0) + 1
            severity_counts[error.severity.value] += 1

        return {
            "total_errors": len(recent_errors),
            "component_counts": component_counts,
            "severity_counts": severity_counts,
            "time_period_hours": hours
        }


global_error_handler = ErrorHandler()


def with_error_handling(component_name: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM,
                        error_handler: Optional[ErrorHandler] = None):
    """Decorator that records any exception and re-raises it unchanged.

    Invalid input is the caller's fault, not a component failure, so
    ``InvalidInputError`` passes through without being recorded.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            handler = error_handler or global_error_handler
            try:
                return func(*args, **kwargs)
            except InvalidInputError:
                raise
            except Exception as e:
                handler.handle_error(component_name, e, severity)
                raise
        return wrapper
    return decorator
