"""
Shared test fixtures and helpers for the soapvalidation test suite.
"""

from typing import List

import pytest

from soapvalidation.config import ValidationConfig
from soapvalidation.response import RawHTTPResponse
from soapvalidation.interceptor import XmlValidationInterceptor
from soapvalidation.pipeline import HTTP_RESPONSE, Exchange, InterceptorChain, SoapMessage


class SendRecorder:
    """ASGI ``send`` callable that records every message."""

    def __init__(self, fail_on: str | None = None):
        self.messages: List[dict] = []
        self.fail_on = fail_on

    async def __call__(self, message: dict):
        if self.fail_on == message["type"]:
            raise ConnectionResetError("client went away")
        self.messages.append(message)

    @property
    def status(self):
        for message in self.messages:
            if message["type"] == "http.response.start":
                return message["status"]
        return None

    @property
    def body(self) -> bytes:
        return b"".join(
            m["body"] for m in self.messages if m["type"] == "http.response.body"
        )


def make_fault_message(fault, send):
    """Build exchange, raw response and chain around ``fault``."""
    response = RawHTTPResponse(send)
    in_message = SoapMessage(properties={HTTP_RESPONSE: response})
    exchange = Exchange(in_message=in_message)
    in_message.exchange = exchange
    message = exchange.create_fault_message(fault)
    return message, response


@pytest.fixture
def recorder():
    return SendRecorder()


@pytest.fixture
def config():
    return ValidationConfig()


@pytest.fixture
def interceptor(config):
    return XmlValidationInterceptor(config)


@pytest.fixture
def chain(interceptor):
    return InterceptorChain([interceptor])
