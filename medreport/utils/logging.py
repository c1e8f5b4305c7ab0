"""
Structured logging configuration for medreport.
Provides request tracking, latency metrics, and audit logging of generation calls.
"""

import functools
import inspect
import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from medreport.utils.config import settings

# Request context for tracking
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
attempt_var: ContextVar[Optional[int]] = ContextVar("attempt", default=None)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add request context if available
        if request_id := request_id_var.get():
            log_entry["request_id"] = request_id
        if (attempt := attempt_var.get()) is not None:
            log_entry["attempt"] = attempt

        # Add extra fields from record
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class LatencyLogger:
    """Specialized logger for latency tracking of remote calls."""

    def __init__(self, name: str = "latency"):
        self.logger = logging.getLogger(name)

    def log_latency(
        self,
        operation: str,
        duration_ms: float,
        success: bool = True,
        model: Optional[str] = None,
        **kwargs,
    ) -> None:
        """Log operation latency with context."""
        threshold_exceeded = kwargs.get("threshold_exceeded", False)
        extra_fields = {
            "operation": operation,
            "duration_ms": duration_ms,
            "success": success,
            "model": model,
            **kwargs,
        }

        if threshold_exceeded or not success:
            level = logging.WARNING
        else:
            level = logging.INFO

        message = f"{operation} completed in {duration_ms:.2f}ms"
        if threshold_exceeded:
            message += " [THRESHOLD EXCEEDED]"
        if not success:
            message += " [FAILED]"

        self.logger.log(level, message, extra={"extra_fields": extra_fields})


class ComplianceLogger:
    """Logger for the audit trail of generation requests.

    Only sizes and counters are recorded; prompt and reply content never is.
    """

    def __init__(self, name: str = "compliance"):
        self.logger = logging.getLogger(name)

    def log_generation(
        self,
        request_id: str,
        model: str,
        prompt_length: int,
        response_length: int,
        attempts: int,
        success: bool,
        **kwargs,
    ) -> None:
        """Log a finished generate call for compliance."""
        extra_fields = {
            "type": "generation",
            "request_id": request_id,
            "model": model,
            "prompt_length": prompt_length,
            "response_length": response_length,
            "attempts": attempts,
            "success": success,
            "timestamp": _utc_timestamp(),
            **kwargs,
        }

        self.logger.info(f"Generation: {model}", extra={"extra_fields": extra_fields})


def setup_logging() -> None:
    """Configure application logging."""
    if settings.enable_structured_logging:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper()))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.compliance_log_path:
        file_handler = logging.FileHandler(settings.compliance_log_path)
        file_handler.setFormatter(formatter)
        compliance_logger = logging.getLogger("compliance")
        compliance_logger.addHandler(file_handler)
        compliance_logger.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance with proper configuration."""
    return logging.getLogger(name)


def get_latency_logger() -> LatencyLogger:
    """Get latency logger instance."""
    return LatencyLogger()


def get_compliance_logger() -> ComplianceLogger:
    """Get compliance logger instance."""
    return ComplianceLogger()


class RequestContext:
    """Context manager binding a request id to every log line of one generate call."""

    def __init__(self, request_id: Optional[str] = None):
        self.request_id = request_id or str(uuid.uuid4())
        self._token = None

    def __enter__(self):
        self._token = request_id_var.set(self.request_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        request_id_var.reset(self._token)


def _check_threshold(duration_ms: float) -> bool:
    """Check if a remote call exceeded the configured latency threshold."""
    return duration_ms > settings.llm_generation_threshold


def monitor_latency(operation: str, model: Optional[str] = None):
    """
    Decorator to monitor coroutine latency with threshold checking.

    Without an explicit ``model`` the label is read from the bound instance's
    ``model`` attribute at call time.
    """

    def decorator(func):
        if not inspect.iscoroutinefunction(func):
            raise TypeError("monitor_latency only wraps coroutine functions")

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            success = True
            try:
                return await func(*args, **kwargs)
            except Exception:
                success = False
                raise
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                get_latency_logger().log_latency(
                    operation=operation,
                    duration_ms=duration_ms,
                    success=success,
                    model=model or getattr(args[0] if args else None, "model", None),
                    threshold_exceeded=_check_threshold(duration_ms),
                )

        return async_wrapper

    return decorator


# Initialize logging on module import
setup_logging()
