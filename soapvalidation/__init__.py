"""
soapvalidation - XML validation interceptor for SOAP services.

Classifies faults raised while an incoming SOAP request is parsed and bound,
and either answers unknown operations like the legacy AXIS endpoint did or
attaches a normalized SOAP fault to the outgoing message.
"""

__version__ = "0.1.0"

from .config import ValidationConfig, ConfigLoader, ConfigError, load_config
from .classifier import FaultClassifier, classify
from .interceptor import XmlValidationInterceptor
from .pipeline import (
    HTTP_RESPONSE,
    Phase,
    SoapMessage,
    Exchange,
    Interceptor,
    InterceptorChain,
)
from .response import RawHTTPResponse
from .asgi import XmlValidationMiddleware
from .faults import (
    Fault,
    FaultCategory,
    ParseFailureKind,
    ProcessingFault,
    UnmarshallingError,
    XmlTokenizerError,
    UnexpectedCharacterError,
    LegacyResponseWriteFault,
    FailureKindRegistry,
    SoapFault,
    FaultResponseBuilder,
    CustomFaultBuilder,
    SoapFaultBuilder,
    FaultReporter,
)

__all__ = [
    "__version__",
    # Config
    "ValidationConfig",
    "ConfigLoader",
    "ConfigError",
    "load_config",
    # Classification
    "FaultClassifier",
    "classify",
    "XmlValidationInterceptor",
    # Pipeline
    "HTTP_RESPONSE",
    "Phase",
    "SoapMessage",
    "Exchange",
    "Interceptor",
    "InterceptorChain",
    "RawHTTPResponse",
    "XmlValidationMiddleware",
    # Faults
    "Fault",
    "FaultCategory",
    "ParseFailureKind",
    "ProcessingFault",
    "UnmarshallingError",
    "XmlTokenizerError",
    "UnexpectedCharacterError",
    "LegacyResponseWriteFault",
    "FailureKindRegistry",
    "SoapFault",
    "FaultResponseBuilder",
    "CustomFaultBuilder",
    "SoapFaultBuilder",
    "FaultReporter",
]
