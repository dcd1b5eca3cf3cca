"""
Interceptor pipeline - the minimal host seams the validation interceptor runs in.

Provides:
- Phase: ordered stages of outbound (fault) processing
- SoapMessage / Exchange: per-request message context
- Interceptor: pluggable step bound to a phase
- InterceptorChain: ordered execution with an idempotent abort
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional
import logging


# Property key under which the raw HTTP response is stored on the in-message
HTTP_RESPONSE = "http.response"


class Phase(str, Enum):
    """Outbound phases, in execution order."""
    SETUP = "setup"
    PRE_LOGICAL = "pre-logical"
    PREPARE_SEND = "prepare-send"
    PRE_STREAM = "pre-stream"
    USER_STREAM = "user-stream"
    POST_STREAM = "post-stream"
    MARSHAL = "marshal"
    WRITE = "write"
    SEND = "send"


PHASE_ORDER = {phase: rank for rank, phase in enumerate(Phase)}


class ChainState(str, Enum):
    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETE = "complete"
    ABORTED = "aborted"


# ============================================================================
# Message context
# ============================================================================

class SoapMessage:
    """
    Per-request message.

    Holds typed content slots (``get_content(Exception)`` yields the fault of a
    fault message), free-form properties, and links to its exchange and the
    chain currently processing it.
    """

    def __init__(
        self,
        exchange: Optional[Exchange] = None,
        *,
        properties: Optional[dict[str, Any]] = None,
    ):
        self.exchange = exchange
        self.properties: dict[str, Any] = dict(properties or {})
        self.interceptor_chain: Optional[InterceptorChain] = None
        self._contents: dict[type, Any] = {}

    def get_content(self, kind: type) -> Any:
        return self._contents.get(kind)

    def set_content(self, kind: type, value: Any):
        if value is None:
            self._contents.pop(kind, None)
        else:
            self._contents[kind] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.properties[key]

    def __setitem__(self, key: str, value: Any):
        self.properties[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self.properties

    def __repr__(self) -> str:
        return f"SoapMessage(contents={sorted(k.__name__ for k in self._contents)})"


@dataclass
class Exchange:
    """Messages belonging to one request/response exchange."""

    in_message: Optional[SoapMessage] = None
    out_message: Optional[SoapMessage] = None
    out_fault_message: Optional[SoapMessage] = None

    def create_fault_message(self, fault: BaseException) -> SoapMessage:
        """Create the out-fault message carrying ``fault`` as its content."""
        message = SoapMessage(self)
        message.set_content(Exception, fault)
        self.out_fault_message = message
        return message


# ============================================================================
# Interceptors
# ============================================================================

class Interceptor(ABC):
    """
    Abstract pipeline step.

    Subclasses pick their phase and priority (lower runs first within a phase).
    """

    phase: Phase = Phase.PRE_STREAM
    priority: int = 50

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    async def handle_message(self, message: SoapMessage) -> None:
        pass


@dataclass
class InterceptorDescriptor:
    """Descriptor for interceptor registration."""
    interceptor: Interceptor
    phase: Phase
    priority: int
    name: str


class InterceptorChain:
    """
    Runs interceptors in phase order, then by priority.

    ``abort()`` may be called any number of times; once aborted, no further
    interceptor runs. Exceptions raised by interceptors propagate unchanged.
    """

    def __init__(self, interceptors: Optional[List[Interceptor]] = None):
        self.interceptors: List[InterceptorDescriptor] = []
        self.state = ChainState.PENDING
        self._sorted = True
        self.logger = logging.getLogger("soapvalidation.pipeline")
        for interceptor in interceptors or []:
            self.add(interceptor)

    def add(
        self,
        interceptor: Interceptor,
        phase: Optional[Phase] = None,
        priority: Optional[int] = None,
        name: Optional[str] = None,
    ):
        """Add interceptor to chain."""
        descriptor = InterceptorDescriptor(
            interceptor=interceptor,
            phase=Phase(phase or interceptor.phase),
            priority=interceptor.priority if priority is None else priority,
            name=name or interceptor.name,
        )
        self.interceptors.append(descriptor)
        self._sorted = False  # Deferred until do_intercept()

    def _sort_interceptors(self):
        """Sort interceptors by phase and priority (stable)."""
        self.interceptors.sort(key=lambda desc: (PHASE_ORDER[desc.phase], desc.priority))

    @property
    def aborted(self) -> bool:
        return self.state is ChainState.ABORTED

    def abort(self):
        """Stop processing after the current interceptor."""
        if self.state is not ChainState.ABORTED:
            self.state = ChainState.ABORTED
            self.logger.debug("Interceptor chain aborted")

    async def do_intercept(self, message: SoapMessage) -> bool:
        """
        Run the chain on ``message``.

        Returns:
            True if every interceptor ran, False if the chain was aborted
        """
        if self.aborted:
            return False

        if not self._sorted:
            self._sort_interceptors()
            self._sorted = True

        self.state = ChainState.EXECUTING
        message.interceptor_chain = self

        for desc in self.interceptors:
            if self.aborted:
                break
            self.logger.debug("Invoking %s in phase %s", desc.name, desc.phase.value)
            await desc.interceptor.handle_message(message)

        if self.aborted:
            return False

        self.state = ChainState.COMPLETE
        return True
