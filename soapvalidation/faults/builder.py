"""
SOAP validation faults - Fault response building.

The interceptor never formats a fault body itself; it hands the outgoing
message and the resolved category to a FaultResponseBuilder. The default
SoapFaultBuilder replaces the message's exception content with a SoapFault,
optionally customised through a CustomFaultBuilder.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Union, TYPE_CHECKING

from lxml import etree

from .core import CATEGORY_DEFAULTS, Fault, FaultCategory, FaultDomain, Severity
from .kinds import message_of

if TYPE_CHECKING:
    from ..pipeline import SoapMessage


SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
NSMAP = {"soap": SOAP_ENV_NS}

Detail = Union[str, etree._Element, None]


def _qname(tag: str) -> str:
    return "{%s}%s" % (SOAP_ENV_NS, tag)


# ============================================================================
# SoapFault - normalized fault payload
# ============================================================================

class SoapFault(Fault):
    """
    Normalized SOAP 1.1 fault attached to an outgoing message.

    Attributes:
        fault_code: Local part of the SOAP fault code ("Client" or "Server")
        message: faultstring
        detail: Text or an XML element placed under <detail>
        category: Classification the fault was built for (None if unclassified)
    """

    def __init__(
        self,
        fault_code: str,
        message: str,
        *,
        detail: Detail = None,
        category: Optional[FaultCategory] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=f"SOAP_FAULT_{fault_code.upper()}",
            message=message,
            domain=FaultDomain.VALIDATION if fault_code == "Client" else FaultDomain.SOAP,
            severity=Severity.WARN if fault_code == "Client" else Severity.ERROR,
            public=True,
            metadata=metadata,
        )
        self.fault_code = fault_code
        self.detail = detail
        self.category = category

    @classmethod
    def from_exception(cls, exc: BaseException) -> "SoapFault":
        """Wrap an unclassified error as a generic Server fault."""
        message = message_of(exc) or type(exc).__name__
        fault = cls("Server", message)
        fault.__cause__ = exc
        return fault

    def to_element(self, parent: Optional[etree._Element] = None) -> etree._Element:
        """Build the <soap:Fault> element, under ``parent`` if given."""
        if parent is None:
            fault_el = etree.Element(_qname("Fault"), nsmap=NSMAP)
        else:
            fault_el = etree.SubElement(parent, _qname("Fault"))

        etree.SubElement(fault_el, "faultcode").text = f"soap:{self.fault_code}"
        etree.SubElement(fault_el, "faultstring").text = self.message

        if self.detail is not None:
            detail_el = etree.SubElement(fault_el, "detail")
            if isinstance(self.detail, etree._Element):
                detail_el.append(self.detail)
            else:
                detail_el.text = str(self.detail)

        return fault_el

    def to_xml(self) -> bytes:
        """Serialize as a complete SOAP 1.1 envelope."""
        envelope = etree.Element(_qname("Envelope"), nsmap=NSMAP)
        body = etree.SubElement(envelope, _qname("Body"))
        self.to_element(body)
        return etree.tostring(envelope, xml_declaration=True, encoding="UTF-8")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["fault_code"] = self.fault_code
        data["category"] = self.category.value if self.category else None
        return data


# ============================================================================
# Builders
# ============================================================================

class CustomFaultBuilder(ABC):
    """
    Hook to customise the faultstring and detail of built faults.

    Example:
        ```python
        class WeatherFaultBuilder(CustomFaultBuilder):
            def create_fault_message(self, category):
                return "Weather request rejected"

            def create_fault_detail(self, original_message, category):
                el = etree.Element("WeatherException")
                etree.SubElement(el, "reason").text = original_message
                return el
        ```
    """

    @abstractmethod
    def create_fault_message(self, category: FaultCategory) -> str:
        pass

    @abstractmethod
    def create_fault_detail(self, original_message: Optional[str], category: FaultCategory) -> Detail:
        pass


class FaultResponseBuilder(ABC):
    """Attaches a normalized fault for a category to an outgoing message."""

    @abstractmethod
    def build(self, message: "SoapMessage", category: FaultCategory) -> None:
        pass


class SoapFaultBuilder(FaultResponseBuilder):
    """
    Default builder: replaces the message's exception content with a SoapFault.

    Without a custom builder the faultstring is the category default, and
    client-side categories carry the original fault message as detail.
    Backend failures carry no detail.
    """

    def __init__(self, custom_builder: Optional[CustomFaultBuilder] = None):
        self.custom_builder = custom_builder

    def build(self, message: "SoapMessage", category: FaultCategory) -> None:
        if not category.builds_fault:
            raise ValueError(f"No SOAP fault is built for category '{category.value}'")

        original = message.get_content(Exception)
        original_message = message_of(original)
        defaults = CATEGORY_DEFAULTS[category]

        if self.custom_builder is not None:
            fault_string = self.custom_builder.create_fault_message(category)
            detail = self.custom_builder.create_fault_detail(original_message, category)
        else:
            fault_string = defaults["message"]
            detail = original_message if defaults["fault_code"] == "Client" else None

        fault = SoapFault(
            defaults["fault_code"],
            fault_string,
            detail=detail,
            category=category,
            metadata={"original_message": original_message},
        )
        if original is not None:
            fault.__cause__ = original

        message.set_content(Exception, fault)
