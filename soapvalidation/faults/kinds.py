"""
Parse failure kind resolution.

Maps errors onto ParseFailureKind tags. An explicit ``parse_failure_kind``
attribute always wins; untagged errors are looked up by type along their MRO.
"""

from __future__ import annotations

from typing import Optional
from xml.parsers.expat import ExpatError
from xml.sax import SAXParseException

from lxml import etree

from .core import Fault, ParseFailureKind


class FailureKindRegistry:
    """
    Registry of exception types known to signal a parse failure.

    Usage:
        ```python
        registry = FailureKindRegistry()
        registry.register(MyReaderError, ParseFailureKind.XML_TOKENIZER)
        registry.kind_of(MyReaderError("bad"))  # ParseFailureKind.XML_TOKENIZER
        ```
    """

    def __init__(self, *, include_defaults: bool = True):
        self._mappings: dict[type, ParseFailureKind] = {}
        if include_defaults:
            self.register(etree.XMLSyntaxError, ParseFailureKind.XML_TOKENIZER)
            self.register(ExpatError, ParseFailureKind.XML_TOKENIZER)
            self.register(SAXParseException, ParseFailureKind.XML_TOKENIZER)
            self.register(ValueError, ParseFailureKind.ILLEGAL_ARGUMENT)

    def register(self, exception_type: type[BaseException], kind: ParseFailureKind):
        """Register the kind signalled by an exception type and its subclasses."""
        self._mappings[exception_type] = ParseFailureKind(kind)

    def unregister(self, exception_type: type[BaseException]):
        self._mappings.pop(exception_type, None)

    def kind_of(self, error: Optional[BaseException]) -> Optional[ParseFailureKind]:
        """
        Resolve the parse failure kind of an error.

        Args:
            error: Error to inspect (None is allowed)

        Returns:
            The kind, or None if the error does not signal a parse failure
        """
        if error is None:
            return None

        tagged = getattr(error, "parse_failure_kind", None)
        if tagged is not None:
            try:
                return ParseFailureKind(tagged)
            except ValueError:
                return None

        for klass in type(error).__mro__:
            kind = self._mappings.get(klass)
            if kind is not None:
                return kind
        return None

    def __contains__(self, exception_type: type) -> bool:
        return exception_type in self._mappings


_default_registry: Optional[FailureKindRegistry] = None


def get_default_registry() -> FailureKindRegistry:
    """Get or create the shared default registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = FailureKindRegistry()
    return _default_registry


def failure_kind_of(
    error: Optional[BaseException],
    registry: Optional[FailureKindRegistry] = None,
) -> Optional[ParseFailureKind]:
    """Resolve the kind of ``error`` with ``registry`` or the default one."""
    return (registry or get_default_registry()).kind_of(error)


def cause_of(error: Optional[BaseException]) -> Optional[BaseException]:
    """
    Nested cause of an error.

    Prefers an explicit ``cause`` attribute and falls back to ``__cause__``
    (set by ``raise ... from ...``). Implicit ``__context__`` is ignored.
    """
    if error is None:
        return None
    cause = getattr(error, "cause", None)
    if isinstance(cause, BaseException):
        return cause
    return error.__cause__


def message_of(error: Optional[BaseException]) -> Optional[str]:
    """
    Text of an error as the classification rules see it.

    Uses a ``message`` attribute when present; other errors fall back to
    ``str(error)``. Empty text counts as no message.
    """
    if error is None:
        return None
    message = getattr(error, "message", None)
    if message is not None:
        return (message if isinstance(message, str) else str(message)) or None
    if isinstance(error, Fault):
        return None
    return str(error) or None
