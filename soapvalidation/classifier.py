"""
Fault classification.

Maps a failed SOAP request's fault onto a FaultCategory. Rules are checked in
priority order and the first match wins:

1. NOT_SCHEME_COMPLIANT: unmarshalling cause, or "Unexpected wrapper element"
   in the message (a valid root element that does not fit the schema yields
   no cause at all)
2. SYNTACTICALLY_INCORRECT_XML: tokenizer cause, unexpected-character error
   exactly one level below the cause (malformed XML declaration), or an
   illegal-argument cause
3. LEGACY_NO_BINDING: message equals the no-binding message, ignoring case
4. BACKEND_PROCESSING_FAILED: any other cause
5. NONE
"""

from __future__ import annotations

from typing import Optional

from .config import ValidationConfig
from .faults.core import FaultCategory, ParseFailureKind
from .faults.kinds import FailureKindRegistry, cause_of, get_default_registry, message_of


TOKENIZER_KINDS = frozenset({
    ParseFailureKind.XML_TOKENIZER,
    ParseFailureKind.UNEXPECTED_CHARACTER,
})


class FaultClassifier:
    """
    Pure classifier: the same fault always yields the same category.

    Usage:
        ```python
        classifier = FaultClassifier()
        category = classifier.classify(ProcessingFault("...", cause=err))
        ```
    """

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        registry: Optional[FailureKindRegistry] = None,
    ):
        self.config = config or ValidationConfig()
        self.registry = registry or get_default_registry()

    def classify(self, fault: Optional[BaseException]) -> FaultCategory:
        if fault is None:
            return FaultCategory.NONE

        message = message_of(fault)
        cause = cause_of(fault)

        if self.is_not_scheme_compliant(cause, message):
            return FaultCategory.NOT_SCHEME_COMPLIANT
        if self.is_syntactically_incorrect(cause):
            return FaultCategory.SYNTACTICALLY_INCORRECT_XML
        if self.is_legacy_no_binding(message):
            return FaultCategory.LEGACY_NO_BINDING
        if cause is not None:
            return FaultCategory.BACKEND_PROCESSING_FAILED
        return FaultCategory.NONE

    def is_not_scheme_compliant(self, cause: Optional[BaseException], message: Optional[str]) -> bool:
        if self.registry.kind_of(cause) is ParseFailureKind.UNMARSHALLING:
            return True
        return message is not None and self.config.wrapper_element_marker in message

    def is_syntactically_incorrect(self, cause: Optional[BaseException]) -> bool:
        if cause is None:
            return False

        kind = self.registry.kind_of(cause)
        if kind in TOKENIZER_KINDS or kind is ParseFailureKind.ILLEGAL_ARGUMENT:
            return True

        # Only one level deep
        nested = cause_of(cause)
        return self.registry.kind_of(nested) is ParseFailureKind.UNEXPECTED_CHARACTER

    def is_legacy_no_binding(self, message: Optional[str]) -> bool:
        if not self.config.legacy_compatibility or message is None:
            return False
        return message.casefold() == self.config.no_binding_message.casefold()


def classify(fault: Optional[BaseException]) -> FaultCategory:
    """Classify with default configuration and the default kind registry."""
    return FaultClassifier().classify(fault)
