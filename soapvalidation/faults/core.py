"""
SOAP validation faults - Core types and fault taxonomy.

Defines:
- Fault base class (structured fault objects)
- FaultDomain (explicit fault domains)
- Severity levels
- FaultCategory (classification outcome of a failed SOAP request)
- ParseFailureKind (capability tag attached by the XML/SOAP layer)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines logging level of a fault when it is reported.
    """
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"   # Unrecoverable, surfaced to the host


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Domains
FaultDomain.SOAP = FaultDomain("soap", "SOAP request parsing and binding")
FaultDomain.VALIDATION = FaultDomain("validation", "XML schema and syntax validation")
FaultDomain.IO = FaultDomain("io", "I/O operations")


DOMAIN_DEFAULTS = {
    FaultDomain.SOAP: Severity.ERROR,
    FaultDomain.VALIDATION: Severity.WARN,
    FaultDomain.IO: Severity.FATAL,
}


# ============================================================================
# Classification
# ============================================================================

class FaultCategory(str, Enum):
    """
    Outcome of classifying a failed SOAP request.

    Categories are checked in declaration order; the first match wins.
    """
    NOT_SCHEME_COMPLIANT = "not_scheme_compliant"
    SYNTACTICALLY_INCORRECT_XML = "syntactically_incorrect_xml"
    LEGACY_NO_BINDING = "legacy_no_binding"
    BACKEND_PROCESSING_FAILED = "backend_processing_failed"
    NONE = "none"

    @property
    def builds_fault(self) -> bool:
        """Whether a normalized SOAP fault is produced for this category."""
        return self in CATEGORY_DEFAULTS


# SOAP 1.1 fault code and default faultstring per category
CATEGORY_DEFAULTS = {
    FaultCategory.NOT_SCHEME_COMPLIANT: {
        "fault_code": "Client",
        "message": "XML schema validation failed",
    },
    FaultCategory.SYNTACTICALLY_INCORRECT_XML: {
        "fault_code": "Client",
        "message": "XML is syntactically incorrect",
    },
    FaultCategory.BACKEND_PROCESSING_FAILED: {
        "fault_code": "Server",
        "message": "Backend processing failed",
    },
}


class ParseFailureKind(str, Enum):
    """
    Kind of parse failure reported by the XML/SOAP layer.

    Errors advertise their kind through a ``parse_failure_kind`` attribute,
    so classification does not depend on any XML library's exception types.
    """
    UNMARSHALLING = "unmarshalling"
    XML_TOKENIZER = "xml_tokenizer"
    UNEXPECTED_CHARACTER = "unexpected_character"
    ILLEGAL_ARGUMENT = "illegal_argument"


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class - structured, typed fault object.

    Attributes:
        code: Stable machine-readable identifier (e.g., "LEGACY_WRITE_FAILED")
        message: Human-readable summary (may be None for host faults)
        severity: Fault severity (INFO, WARN, ERROR, FATAL)
        domain: Fault domain (SOAP, VALIDATION, IO, ...)
        public: Whether safe to expose to client
        metadata: Additional context data

    Example:
        ```python
        raise Fault(
            code="LEGACY_WRITE_FAILED",
            message="Could not write legacy response",
            domain=FaultDomain.IO,
            severity=Severity.FATAL,
        )
        ```
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        public: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ):
        # Fallback to class attributes if not provided
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.domain is None:
            raise TypeError(f"{self.__class__.__name__} missing required code or domain")

        super().__init__(self.message)

        self.severity = severity or DOMAIN_DEFAULTS.get(self.domain, Severity.ERROR)
        self.public = public
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, domain={self.domain.value}, "
            f"severity={self.severity.value}, public={self.public})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize fault to dictionary.

        Returns:
            Dictionary representation suitable for logging/serialization
        """
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "public": self.public,
            "metadata": self.metadata,
        }
