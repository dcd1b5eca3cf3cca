"""
XML validation interceptor.

Runs early in the outbound fault chain (PRE_STREAM, before any response bytes
are streamed) and handles XML schema and syntax errors raised while the
incoming SOAP request was read:

- schema, syntax and backend failures are logged and handed to a
  FaultResponseBuilder, which attaches a normalized SOAP fault
- an unknown operation is answered the way the legacy AXIS endpoint did: a
  fixed HTML page with status 200, after which the chain is aborted
- anything else is left to the host's normal error handling
"""

from __future__ import annotations

import logging
from typing import Optional

from .classifier import FaultClassifier
from .config import ValidationConfig
from .faults.builder import FaultResponseBuilder, SoapFaultBuilder
from .faults.core import FaultCategory
from .faults.domains import LegacyResponseWriteFault
from .faults.kinds import FailureKindRegistry, cause_of, message_of
from .faults.reporting import FaultReporter
from .response import RawHTTPResponse
from .pipeline import HTTP_RESPONSE, Interceptor, Phase, SoapMessage


class XmlValidationInterceptor(Interceptor):
    """
    Classifies the fault of a failed request and responds to it.

    Holds no per-request state; one instance serves all requests.

    Usage:
        ```python
        interceptor = XmlValidationInterceptor(fault_builder=SoapFaultBuilder(MyCustomFaultBuilder()))
        chain = InterceptorChain([interceptor])
        await chain.do_intercept(exchange.create_fault_message(fault))
        ```
    """

    phase = Phase.PRE_STREAM

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        *,
        fault_builder: Optional[FaultResponseBuilder] = None,
        reporter: Optional[FaultReporter] = None,
        registry: Optional[FailureKindRegistry] = None,
    ):
        self.config = config or ValidationConfig()
        self.classifier = FaultClassifier(self.config, registry)
        self.fault_builder = fault_builder or SoapFaultBuilder()
        self.reporter = reporter or FaultReporter(
            logging.getLogger(self.config.logger_name),
            debug=self.config.debug,
        )
        self._legacy_body = self.config.legacy_body.encode("utf-8")

    async def handle_message(self, message: SoapMessage) -> None:
        fault = message.get_content(Exception)
        if not isinstance(fault, BaseException):
            return

        category = self.classifier.classify(fault)
        fault_message = message_of(fault)

        if category in (FaultCategory.NOT_SCHEME_COMPLIANT, FaultCategory.SYNTACTICALLY_INCORRECT_XML):
            self.reporter.validation_failed(category, fault_message, error=fault)
            self.fault_builder.build(message, category)

        elif category is FaultCategory.LEGACY_NO_BINDING:
            await self.send_legacy_response(message)
            self.reporter.legacy_response_sent(fault_message)

        elif category is FaultCategory.BACKEND_PROCESSING_FAILED:
            self.reporter.backend_failed(cause_of(fault))
            self.fault_builder.build(message, category)

    async def send_legacy_response(self, message: SoapMessage) -> None:
        """
        Answer with the legacy page and abort the chain.

        Raises:
            LegacyResponseWriteFault: No raw response available, or writing failed
        """
        response = self._raw_response(message)
        if response is None:
            raise LegacyResponseWriteFault("no raw HTTP response on the exchange")

        response.set_status(self.config.legacy_status)
        try:
            await response.output_stream.write(self._legacy_body)
            await response.output_stream.flush()
        except OSError as e:
            raise LegacyResponseWriteFault(str(e) or type(e).__name__) from e

        if message.interceptor_chain is not None:
            message.interceptor_chain.abort()

    @staticmethod
    def _raw_response(message: SoapMessage) -> Optional[RawHTTPResponse]:
        exchange = message.exchange
        if exchange is not None and exchange.in_message is not None:
            response = exchange.in_message.get(HTTP_RESPONSE)
            if response is not None:
                return response
        return message.get(HTTP_RESPONSE)
