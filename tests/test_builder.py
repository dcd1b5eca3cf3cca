"""
Fault response building (faults/builder.py)

Tests SoapFault serialization, SoapFaultBuilder defaults and custom builders.
"""

import pytest
from lxml import etree

from soapvalidation.faults import (
    CustomFaultBuilder,
    FaultCategory,
    FaultDomain,
    ProcessingFault,
    SoapFault,
    SoapFaultBuilder,
)
from soapvalidation.faults.builder import SOAP_ENV_NS
from soapvalidation.pipeline import Exchange, SoapMessage


NS = {"soap": SOAP_ENV_NS}


def fault_message(fault):
    return Exchange().create_fault_message(fault)


# ============================================================================
# SoapFault
# ============================================================================

class TestSoapFault:

    def test_envelope(self):
        fault = SoapFault("Client", "XML schema validation failed", detail="bad element")
        root = etree.fromstring(fault.to_xml())

        assert root.tag == "{%s}Envelope" % SOAP_ENV_NS
        assert root.findtext("soap:Body/soap:Fault/faultcode", namespaces=NS) == "soap:Client"
        assert root.findtext("soap:Body/soap:Fault/faultstring", namespaces=NS) == "XML schema validation failed"
        assert root.findtext("soap:Body/soap:Fault/detail", namespaces=NS) == "bad element"

    def test_xml_declaration(self):
        assert SoapFault("Server", "x").to_xml().startswith(b"<?xml version='1.0' encoding='UTF-8'?>")

    def test_without_detail(self):
        element = SoapFault("Server", "Backend processing failed").to_element()
        assert element.find("detail") is None

    def test_element_detail(self):
        detail = etree.Element("{urn:weather}WeatherException")
        etree.SubElement(detail, "{urn:weather}reason").text = "city unknown"
        element = SoapFault("Client", "rejected", detail=detail).to_element()

        assert element.findtext("detail/{urn:weather}WeatherException/{urn:weather}reason") == "city unknown"

    def test_client_and_server_domains(self):
        assert SoapFault("Client", "x").domain == FaultDomain.VALIDATION
        assert SoapFault("Server", "x").domain == FaultDomain.SOAP

    def test_from_exception(self):
        cause = ProcessingFault("Something unrelated")
        fault = SoapFault.from_exception(cause)
        assert fault.fault_code == "Server"
        assert fault.message == "Something unrelated"
        assert fault.__cause__ is cause
        assert fault.category is None

    def test_from_exception_without_message(self):
        assert SoapFault.from_exception(ProcessingFault()).message == "ProcessingFault"

    def test_to_dict(self):
        data = SoapFault("Client", "x", category=FaultCategory.NOT_SCHEME_COMPLIANT).to_dict()
        assert data["fault_code"] == "Client"
        assert data["category"] == "not_scheme_compliant"
        assert data["public"] is True


# ============================================================================
# SoapFaultBuilder
# ============================================================================

class TestSoapFaultBuilder:

    def test_not_scheme_compliant(self):
        original = ProcessingFault("Unexpected wrapper element {urn:x}Foo found")
        message = fault_message(original)

        SoapFaultBuilder().build(message, FaultCategory.NOT_SCHEME_COMPLIANT)

        fault = message.get_content(Exception)
        assert isinstance(fault, SoapFault)
        assert fault.fault_code == "Client"
        assert fault.message == "XML schema validation failed"
        assert fault.detail == "Unexpected wrapper element {urn:x}Foo found"
        assert fault.__cause__ is original

    def test_syntactically_incorrect(self):
        message = fault_message(ProcessingFault("Unexpected close tag"))
        SoapFaultBuilder().build(message, FaultCategory.SYNTACTICALLY_INCORRECT_XML)
        fault = message.get_content(Exception)
        assert fault.fault_code == "Client"
        assert fault.message == "XML is syntactically incorrect"

    def test_backend_failure_has_no_detail(self):
        message = fault_message(ProcessingFault("NullPointer in WeatherService", cause=RuntimeError()))
        SoapFaultBuilder().build(message, FaultCategory.BACKEND_PROCESSING_FAILED)
        fault = message.get_content(Exception)
        assert fault.fault_code == "Server"
        assert fault.message == "Backend processing failed"
        assert fault.detail is None
        assert fault.metadata["original_message"] == "NullPointer in WeatherService"

    @pytest.mark.parametrize("category", [FaultCategory.LEGACY_NO_BINDING, FaultCategory.NONE])
    def test_categories_without_fault(self, category):
        with pytest.raises(ValueError):
            SoapFaultBuilder().build(fault_message(ProcessingFault("x")), category)

    def test_message_without_content(self):
        message = SoapMessage()
        SoapFaultBuilder().build(message, FaultCategory.SYNTACTICALLY_INCORRECT_XML)
        fault = message.get_content(Exception)
        assert fault.detail is None
        assert fault.__cause__ is None

    def test_custom_builder(self):
        class WeatherFaultBuilder(CustomFaultBuilder):
            def create_fault_message(self, category):
                return f"Weather request rejected ({category.value})"

            def create_fault_detail(self, original_message, category):
                el = etree.Element("WeatherException")
                etree.SubElement(el, "reason").text = original_message
                return el

        message = fault_message(ProcessingFault("bad element"))
        SoapFaultBuilder(WeatherFaultBuilder()).build(message, FaultCategory.NOT_SCHEME_COMPLIANT)

        fault = message.get_content(Exception)
        assert fault.message == "Weather request rejected (not_scheme_compliant)"
        assert fault.to_element().findtext("detail/WeatherException/reason") == "bad element"

    def test_custom_builder_is_abstract(self):
        with pytest.raises(TypeError):
            CustomFaultBuilder()
