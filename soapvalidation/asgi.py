"""
ASGI adapter - runs the validation interceptor around a SOAP ASGI application.

When the wrapped application raises a ProcessingFault before it started its
response, the middleware builds the exchange, runs the PRE_STREAM fault chain
and then either ends the legacy response the interceptor wrote, or writes the
resulting SOAP fault envelope.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional
import logging

from .config import ValidationConfig
from .faults.builder import SoapFault
from .faults.domains import ProcessingFault
from .response import RawHTTPResponse
from .interceptor import XmlValidationInterceptor
from .pipeline import HTTP_RESPONSE, Exchange, Interceptor, InterceptorChain, SoapMessage

ASGIApp = Callable[[dict, Callable, Callable], Awaitable[None]]

# Property key for the ASGI scope on the in-message
ASGI_SCOPE = "asgi.scope"


class XmlValidationMiddleware:
    """
    ASGI middleware hosting XmlValidationInterceptor.

    Usage:
        ```python
        app = XmlValidationMiddleware(soap_app, config=load_config(paths=["soap.yaml"]))
        ```
    """

    def __init__(
        self,
        app: ASGIApp,
        interceptor: Optional[XmlValidationInterceptor] = None,
        *,
        config: Optional[ValidationConfig] = None,
        interceptors: Optional[list[Interceptor]] = None,
    ):
        self.app = app
        if interceptor is None:
            interceptor = XmlValidationInterceptor(config)
        self.interceptor = interceptor
        self.config = interceptor.config
        self.interceptors = list(interceptors or [])
        self.logger = logging.getLogger("soapvalidation.asgi")

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def tracking_send(message: dict):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except ProcessingFault as fault:
            if started:
                self.logger.error(
                    "Fault raised after the response started, cannot answer with a SOAP fault: %s",
                    fault,
                )
                raise
            await self.handle_fault(fault, scope, send)

    def build_chain(self) -> InterceptorChain:
        return InterceptorChain([self.interceptor, *self.interceptors])

    async def handle_fault(self, fault: ProcessingFault, scope: dict, send: Callable) -> None:
        response = RawHTTPResponse(send)
        in_message = SoapMessage(properties={HTTP_RESPONSE: response, ASGI_SCOPE: scope})
        exchange = Exchange(in_message=in_message)
        in_message.exchange = exchange
        fault_message = exchange.create_fault_message(fault)

        completed = await self.build_chain().do_intercept(fault_message)
        if not completed or response.committed:
            await response.close()
            return

        content: Any = fault_message.get_content(Exception)
        if isinstance(content, SoapFault):
            soap_fault = content
        else:
            soap_fault = SoapFault.from_exception(content)

        await self.write_fault(response, soap_fault)

    async def write_fault(self, response: RawHTTPResponse, fault: SoapFault) -> None:
        body = fault.to_xml()
        response.set_status(self.config.fault_status)
        response.set_header("content-type", "text/xml; charset=utf-8")
        response.set_header("content-length", str(len(body)))
        await response.output_stream.write(body)
        await response.close()
