"""
Raw HTTP response bound to an ASGI ``send`` callable.

Bytes written to the output stream are buffered until ``flush()``. The first
flush sends ``http.response.start`` with the current status and headers;
``close()`` ends the body.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

Send = Callable[[dict], Awaitable[None]]


class ResponseClosedError(OSError):
    """Write attempted on a response whose body has already ended."""


class ResponseOutputStream:
    """Byte stream of a RawHTTPResponse."""

    def __init__(self, response: RawHTTPResponse):
        self._response = response
        self._buffer = bytearray()
        self.bytes_sent = 0

    async def write(self, data: bytes):
        if self._response.closed:
            raise ResponseClosedError("Response body already ended")
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Response body must be bytes, got {type(data).__name__}")
        self._buffer.extend(data)

    async def flush(self):
        if self._response.closed:
            raise ResponseClosedError("Response body already ended")
        await self._response._start()
        if self._buffer:
            chunk = bytes(self._buffer)
            self._buffer.clear()
            await self._response._send({
                "type": "http.response.body",
                "body": chunk,
                "more_body": True,
            })
            self.bytes_sent += len(chunk)


class RawHTTPResponse:
    """
    Low-level response of the current exchange.

    Usage:
        ```python
        response = RawHTTPResponse(send)
        response.set_status(200)
        await response.output_stream.write(b"<h1>...</h1>")
        await response.output_stream.flush()
        await response.close()
        ```
    """

    def __init__(self, send: Send, *, headers: Optional[dict[str, str]] = None):
        self._send = send
        self.status = 200
        self.headers: dict[str, str] = {k.lower(): v for k, v in (headers or {}).items()}
        self.output_stream = ResponseOutputStream(self)
        self.committed = False
        self.closed = False

    def set_status(self, code: int):
        if self.committed:
            raise RuntimeError("Cannot change status after the response was committed")
        self.status = code

    def set_header(self, name: str, value: str):
        if self.committed:
            raise RuntimeError("Cannot change headers after the response was committed")
        self.headers[name.lower()] = value

    async def _start(self):
        if self.committed:
            return
        self.committed = True
        await self._send({
            "type": "http.response.start",
            "status": self.status,
            "headers": [
                (name.encode("latin-1"), value.encode("latin-1"))
                for name, value in self.headers.items()
            ],
        })

    async def close(self):
        """Flush pending bytes and end the body. Idempotent."""
        if self.closed:
            return
        await self.output_stream.flush()
        self.closed = True
        await self._send({
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        })
