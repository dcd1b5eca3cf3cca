"""
Interceptor pipeline (pipeline.py)

Tests SoapMessage, Exchange and InterceptorChain ordering and abort.
"""

import pytest

from soapvalidation.pipeline import (
    ChainState,
    Exchange,
    Interceptor,
    InterceptorChain,
    Phase,
    SoapMessage,
)


def recording(calls, label, phase=Phase.PRE_STREAM, priority=50, abort=False):
    class Recording(Interceptor):
        async def handle_message(self, message):
            calls.append(label)
            if abort:
                message.interceptor_chain.abort()

    Recording.phase = phase
    Recording.priority = priority
    return Recording()


# ============================================================================
# SoapMessage / Exchange
# ============================================================================

class TestSoapMessage:

    def test_content_slots(self):
        msg = SoapMessage()
        err = RuntimeError("x")
        msg.set_content(Exception, err)
        assert msg.get_content(Exception) is err
        assert msg.get_content(str) is None

    def test_set_none_removes(self):
        msg = SoapMessage()
        msg.set_content(Exception, RuntimeError())
        msg.set_content(Exception, None)
        assert msg.get_content(Exception) is None

    def test_properties(self):
        msg = SoapMessage(properties={"a": 1})
        msg["b"] = 2
        assert msg["a"] == 1
        assert msg.get("b") == 2
        assert msg.get("c", 3) == 3
        assert "a" in msg


class TestExchange:

    def test_create_fault_message(self):
        exchange = Exchange(in_message=SoapMessage())
        err = RuntimeError("x")
        message = exchange.create_fault_message(err)
        assert exchange.out_fault_message is message
        assert message.exchange is exchange
        assert message.get_content(Exception) is err


# ============================================================================
# InterceptorChain
# ============================================================================

class TestInterceptorChain:

    @pytest.mark.asyncio
    async def test_phase_order(self):
        calls = []
        chain = InterceptorChain([
            recording(calls, "write", Phase.WRITE),
            recording(calls, "setup", Phase.SETUP),
            recording(calls, "pre-stream", Phase.PRE_STREAM),
        ])
        assert await chain.do_intercept(SoapMessage()) is True
        assert calls == ["setup", "pre-stream", "write"]
        assert chain.state is ChainState.COMPLETE

    @pytest.mark.asyncio
    async def test_priority_within_phase(self):
        calls = []
        chain = InterceptorChain()
        chain.add(recording(calls, "late", priority=90))
        chain.add(recording(calls, "early", priority=10))
        await chain.do_intercept(SoapMessage())
        assert calls == ["early", "late"]

    @pytest.mark.asyncio
    async def test_add_overrides(self):
        calls = []
        chain = InterceptorChain([recording(calls, "a", Phase.PRE_STREAM)])
        chain.add(recording(calls, "b", Phase.SEND), phase=Phase.SETUP, name="moved")
        await chain.do_intercept(SoapMessage())
        assert calls == ["b", "a"]
        assert chain.interceptors[0].name == "moved"

    @pytest.mark.asyncio
    async def test_abort_stops_chain(self):
        calls = []
        chain = InterceptorChain([
            recording(calls, "first", abort=True),
            recording(calls, "second", Phase.WRITE),
        ])
        assert await chain.do_intercept(SoapMessage()) is False
        assert calls == ["first"]
        assert chain.aborted

    def test_abort_is_idempotent(self):
        chain = InterceptorChain()
        chain.abort()
        chain.abort()
        assert chain.state is ChainState.ABORTED

    @pytest.mark.asyncio
    async def test_aborted_chain_does_not_run(self):
        calls = []
        chain = InterceptorChain([recording(calls, "a")])
        chain.abort()
        assert await chain.do_intercept(SoapMessage()) is False
        assert calls == []

    @pytest.mark.asyncio
    async def test_message_bound_to_chain(self):
        chain = InterceptorChain()
        msg = SoapMessage()
        await chain.do_intercept(msg)
        assert msg.interceptor_chain is chain

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self):
        class Boom(Interceptor):
            async def handle_message(self, message):
                raise OSError("disk")

        with pytest.raises(OSError, match="disk"):
            await InterceptorChain([Boom()]).do_intercept(SoapMessage())

    def test_interceptor_is_abstract(self):
        with pytest.raises(TypeError):
            Interceptor()
