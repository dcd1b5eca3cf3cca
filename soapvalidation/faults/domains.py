"""
SOAP validation faults - Domain-specific fault types.

Provides:
- ProcessingFault: raised by the host when a SOAP request cannot be parsed or bound
- XML parse errors tagged with a ParseFailureKind
- LegacyResponseWriteFault: the legacy compatibility answer could not be written
"""

from typing import Any, Optional

from .core import Fault, FaultDomain, ParseFailureKind, Severity


# ============================================================================
# SOAP Faults
# ============================================================================

class ProcessingFault(Fault):
    """
    Fault raised while an incoming SOAP request is parsed and bound.

    ``message`` may be None. ``cause`` is the nested error, if any; it is
    also installed as ``__cause__`` so tracebacks show the chain.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
        *,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code="SOAP_PROCESSING_FAILED",
            message=message,
            domain=FaultDomain.SOAP,
            metadata=metadata,
        )
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message or ""


# ============================================================================
# XML Parse Errors
# ============================================================================

class XmlParseError(Exception):
    """Base class for errors raised by an XML/SOAP reading layer."""

    parse_failure_kind: Optional[ParseFailureKind] = None

    def __init__(self, message: str = "", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class UnmarshallingError(XmlParseError):
    """Well-formed XML that does not map onto the expected types."""

    parse_failure_kind = ParseFailureKind.UNMARSHALLING


class XmlTokenizerError(XmlParseError):
    """Low-level tokenizer failure: the input is not well-formed XML."""

    parse_failure_kind = ParseFailureKind.XML_TOKENIZER

    def __init__(
        self,
        message: str = "",
        cause: Optional[BaseException] = None,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message, cause)
        self.line = line
        self.column = column


class UnexpectedCharacterError(XmlTokenizerError):
    """Tokenizer hit a character that is not allowed at its position."""

    parse_failure_kind = ParseFailureKind.UNEXPECTED_CHARACTER

    def __init__(self, message: str = "", char: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.char = char


# ============================================================================
# IO Faults
# ============================================================================

class LegacyResponseWriteFault(Fault):
    """Writing or flushing the legacy compatibility response failed."""

    def __init__(self, reason: str, **kwargs):
        super().__init__(
            code="LEGACY_RESPONSE_WRITE_FAILED",
            message=f"Error writing the legacy response: {reason}",
            domain=FaultDomain.IO,
            severity=Severity.FATAL,
            metadata={"reason": reason, **kwargs.get("metadata", {})},
        )
