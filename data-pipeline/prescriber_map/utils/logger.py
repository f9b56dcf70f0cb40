"""
Logging infrastructure for the prescriber sync pipeline.

Provides:
- Structured logging with timestamps
- Different log levels (DEBUG, INFO, WARNING, ERROR)
- File and console output
- Error and warning tracking for the end-of-run summary
"""

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional


class MillisecondsFormatter(logging.Formatter):
    """Custom formatter that includes milliseconds and aligns log levels."""

    def formatTime(self, record, datefmt=None):  # noqa: N802 - must match parent class method name
        """Override formatTime to include milliseconds."""
        ct = datetime.fromtimestamp(record.created)
        if datefmt and "%f" in datefmt:
            s = ct.strftime(datefmt.replace(",%f", ""))
            return s + f",{int(record.msecs):03d}"
        elif datefmt:
            return ct.strftime(datefmt)
        else:
            return ct.strftime("%Y-%m-%d %H:%M:%S") + f",{int(record.msecs):03d}"


def _format_string(phase: Optional[str]) -> str:
    if phase:
        return f"%(asctime)s | %(levelname)-8s | {phase} | %(filename)s:%(lineno)d | %(message)s"
    return "%(asctime)s | %(levelname)-8s | %(filename)s:%(lineno)d | %(message)s"


def _with_fields(message: str, fields: dict) -> str:
    if not fields:
        return message
    formatted_data = " ".join(f"{k}={v}" for k, v in fields.items())
    return f"{message} [{formatted_data}]"


class PipelineLogger:
    """
    Centralized logger for the pipeline with structured output.
    """

    def __init__(
        self,
        name: str = "prescriber_sync",
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        log_dir: Optional[Path] = None,
        phase: Optional[str] = None,
    ):
        """
        Initialize the pipeline logger.

        Args:
            name: Logger name
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_file: Optional log file name
            log_dir: Directory for log files (defaults to logs/)
            phase: Optional pipeline phase name (e.g., "Fetch", "Lookup")
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.phase = phase

        # Prevent propagation to root logger to avoid duplicate logs
        self.logger.propagate = False

        if self.logger.handlers:
            self.logger.handlers.clear()

        fmt_str = _format_string(phase)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level.upper()))
        console_formatter = MillisecondsFormatter(fmt_str, datefmt="%Y-%m-%d %H:%M:%S,%f")
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            if log_dir is None:
                # Default to pipeline root/logs directory
                log_dir = Path(__file__).parent.parent.parent / "logs"

            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / log_file

            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(logging.DEBUG)  # Log everything to file
            file_handler.setFormatter(MillisecondsFormatter(fmt_str, datefmt="%Y-%m-%d %H:%M:%S,%f"))
            self.logger.addHandler(file_handler)

            self.info(f"Logging to file: {log_path}")

        self.errors = []
        self.warnings = []

    def _emit(
        self,
        level: int,
        message: str,
        fields: dict,
        stacklevel: int,
        exception: Optional[Exception] = None,
    ):
        """
        Format, log and track one message.

        ``stacklevel`` is counted from this frame, so %(filename)s:%(lineno)d
        names the pipeline code that called the public method, not this module.
        """
        if exception:
            message = f"{message} | Exception: {str(exception)}"
        message = _with_fields(message, fields)
        self.logger.log(level, message, exc_info=exception is not None, stacklevel=stacklevel)

        if level == logging.WARNING:
            self.warnings.append(
                {
                    "message": message,
                    "timestamp": datetime.now().isoformat(),
                    "data": fields,
                }
            )
        elif level >= logging.ERROR:
            self.errors.append(
                {
                    "message": message,
                    "exception": str(exception) if exception else None,
                    "timestamp": datetime.now().isoformat(),
                    "data": fields,
                }
            )

    def debug(self, message: str, **kwargs):
        """Log debug message with optional structured data."""
        self._emit(logging.DEBUG, message, kwargs, stacklevel=3)

    def info(self, message: str, **kwargs):
        """Log info message with optional structured data."""
        self._emit(logging.INFO, message, kwargs, stacklevel=3)

    def warning(self, message: str, **kwargs):
        """Log warning message and track for reporting."""
        self._emit(logging.WARNING, message, kwargs, stacklevel=3)

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs):
        """Log error message and track for reporting."""
        self._emit(logging.ERROR, message, kwargs, stacklevel=3, exception=exception)

    def log_record_degraded(self, contact_id: str, stage: str, reason: str):
        """Log a per-contact failure that nulls out fields without aborting the run."""
        self._emit(
            logging.WARNING,
            f"Degraded {stage} for contact",
            {"contact_id": contact_id, "stage": stage, "reason": reason},
            stacklevel=3,
        )

    def log_progress(self, processed: int, total: int, geocoded: int, no_address: int):
        """Log sync progress counters."""
        self._emit(
            logging.INFO,
            f"Processed {processed}/{total}",
            {"geocoded": geocoded, "no_address": no_address},
            stacklevel=3,
        )

    def log_pipeline_start(self, geocoder: str, enrich: bool, dry_run: bool):
        """Log start of pipeline run."""
        self._emit(logging.INFO, "=" * 60, {}, stacklevel=3)
        self._emit(
            logging.INFO,
            "Prescriber sync started",
            {"geocoder": geocoder, "enrich": enrich, "dry_run": dry_run},
            stacklevel=3,
        )
        self._emit(logging.INFO, "=" * 60, {}, stacklevel=3)

    def log_pipeline_complete(
        self,
        total: int,
        geocoded: int,
        no_address: int,
        duration_seconds: float,
    ):
        """Log completion of pipeline run."""
        fields = {
            "total": total,
            "geocoded": geocoded,
            "no_address": no_address,
            "warnings": len(self.warnings),
            "duration_seconds": round(duration_seconds, 2),
        }
        self._emit(logging.INFO, "=" * 60, {}, stacklevel=3)
        self._emit(logging.INFO, "Prescriber sync completed", fields, stacklevel=3)
        self._emit(logging.INFO, "=" * 60, {}, stacklevel=3)

    @contextmanager
    def time_stage(self, stage: str, **fields):
        """
        Context manager to time and log a pipeline stage.

        Failures are logged at error level and re-raised; callers should not
        log the same exception again.

        Usage:
            with logger.time_stage("contact listing"):
                # ... perform operation ...
        """
        # _emit <- time_stage <- contextlib __enter__/__exit__ <- caller
        start_time = datetime.now()
        self._emit(logging.DEBUG, f"Starting {stage}", fields, stacklevel=4)

        try:
            yield
            duration = (datetime.now() - start_time).total_seconds()
            self._emit(
                logging.INFO,
                f"Completed {stage}",
                {"duration_seconds": round(duration, 2), **fields},
                stacklevel=4,
            )
        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            self._emit(
                logging.ERROR,
                f"Failed {stage}",
                {"duration_seconds": round(duration, 2), **fields},
                stacklevel=4,
                exception=e,
            )
            raise


# ============================================================================
# Global Logging Configuration
# ============================================================================


def configure_global_logging(log_level: str = "INFO", phase: Optional[str] = None):
    """
    Configure all logging (root + third-party libraries) with unified format.

    Call this early in application startup to ensure all logs are consistently formatted.

    Args:
        log_level: Logging level to apply globally (DEBUG, INFO, WARNING, ERROR)
        phase: Optional pipeline phase name
    """
    formatter = MillisecondsFormatter(_format_string(phase), datefmt="%Y-%m-%d %H:%M:%S,%f")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers.clear()

    root_handler = logging.StreamHandler(sys.stdout)
    root_handler.setLevel(getattr(logging, log_level.upper()))
    root_handler.setFormatter(formatter)
    root_logger.addHandler(root_handler)

    for lib_name in ["urllib3", "requests"]:
        lib_logger = logging.getLogger(lib_name)
        lib_logger.handlers.clear()
        lib_logger.propagate = True
        # Connection-pool chatter is only useful when debugging
        lib_logger.setLevel(logging.WARNING if log_level.upper() != "DEBUG" else logging.DEBUG)
