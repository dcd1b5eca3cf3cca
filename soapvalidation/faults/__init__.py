"""
SOAP validation faults - structured fault types for failed SOAP requests.

Core exports:
- Fault: Base fault class
- FaultDomain / Severity: Fault taxonomy
- FaultCategory: Classification outcome
- ParseFailureKind: Capability tag of XML parse errors
- ProcessingFault: Fault raised by the host for a failed request
- SoapFault / SoapFaultBuilder: Normalized SOAP 1.1 fault and its builder
- FaultReporter: Structured logging of classified faults
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    FaultCategory,
    ParseFailureKind,
    CATEGORY_DEFAULTS,
)

from .domains import (
    ProcessingFault,
    XmlParseError,
    UnmarshallingError,
    XmlTokenizerError,
    UnexpectedCharacterError,
    LegacyResponseWriteFault,
)

from .kinds import (
    FailureKindRegistry,
    get_default_registry,
    failure_kind_of,
    cause_of,
    message_of,
)

from .builder import (
    SoapFault,
    FaultResponseBuilder,
    CustomFaultBuilder,
    SoapFaultBuilder,
)

from .reporting import FaultReporter

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "FaultCategory",
    "ParseFailureKind",
    "CATEGORY_DEFAULTS",

    # Domain faults
    "ProcessingFault",
    "XmlParseError",
    "UnmarshallingError",
    "XmlTokenizerError",
    "UnexpectedCharacterError",
    "LegacyResponseWriteFault",

    # Kind resolution
    "FailureKindRegistry",
    "get_default_registry",
    "failure_kind_of",
    "cause_of",
    "message_of",

    # Fault building
    "SoapFault",
    "FaultResponseBuilder",
    "CustomFaultBuilder",
    "SoapFaultBuilder",

    # Logging
    "FaultReporter",
]
