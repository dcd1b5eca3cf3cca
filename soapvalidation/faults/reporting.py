"""
Structured logging of classified faults.
"""

from __future__ import annotations

import logging
from typing import Optional

from .core import FaultCategory, Severity


LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class FaultReporter:
    """
    Logs classification events with structured metadata.

    Records carry ``fault_category`` and ``fault_message`` in ``extra`` so a
    structured formatter can pick them up. Fire-and-forget: nothing is returned.

    Usage:
        ```python
        reporter = FaultReporter()
        reporter.validation_failed(FaultCategory.NOT_SCHEME_COMPLIANT, "Unexpected wrapper element ...")
        ```
    """

    def __init__(self, logger: Optional[logging.Logger] = None, *, debug: bool = False):
        self.logger = logger or logging.getLogger("soapvalidation.faults")
        self.debug = debug

    def validation_failed(
        self,
        category: FaultCategory,
        message: Optional[str],
        *,
        severity: Severity = Severity.WARN,
        error: Optional[BaseException] = None,
    ):
        """
        Log a schema or syntax failure of an incoming request.

        In debug mode the record also carries the traceback of ``error``.
        """
        exc_info = None
        if self.debug and error is not None:
            exc_info = (type(error), error, error.__traceback__)

        self.logger.log(
            LOG_LEVELS[severity],
            "[%s] XML validation failed: %s",
            category.value.upper(),
            message,
            exc_info=exc_info,
            extra={
                "fault_category": category.value,
                "fault_message": message,
            },
        )

    def backend_failed(self, cause: BaseException):
        """Log an error raised by backend logic while handling a request."""
        self.logger.error(
            "[%s] Backend processing failed: %s: %s",
            FaultCategory.BACKEND_PROCESSING_FAILED.value.upper(),
            type(cause).__name__,
            cause,
            exc_info=(type(cause), cause, cause.__traceback__),
            extra={
                "fault_category": FaultCategory.BACKEND_PROCESSING_FAILED.value,
                "fault_message": str(cause),
            },
        )

    def legacy_response_sent(self, message: Optional[str]):
        self.logger.info(
            "Answered unknown SOAP operation with legacy compatibility page",
            extra={
                "fault_category": FaultCategory.LEGACY_NO_BINDING.value,
                "fault_message": message,
            },
        )
