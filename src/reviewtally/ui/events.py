"""Typed event bus connecting the counting monitor to host surfaces.

Hosts publish nothing directly; :class:`~reviewtally.ui.monitor.ReviewCountMonitor`
publishes the events below so that status bars, overlays and loggers can
react without holding a reference to the monitor.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, TYPE_CHECKING
from weakref import WeakMethod

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from typing import DefaultDict

    from ..core.report import SectionReport

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all bus events."""


@dataclass(slots=True)
class DocumentChanged(Event):
    """A host edit covering ``[start, end)`` was received."""

    start: int
    end: int
    version_id: int | None = None


@dataclass(slots=True)
class FocusMoved(Event):
    """The host focus (cursor) moved to ``position``."""

    position: int


@dataclass(slots=True)
class FullReportUpdated(Event):
    """A debounced full-document refresh finished.

    Attributes:
        reports: Section reports in document order.
        trigger: What caused the refresh (``"debounce"``, ``"manual"``...).
        latency_ms: Time spent scanning and counting.
    """

    reports: tuple["SectionReport", ...]
    trigger: str = "debounce"
    latency_ms: float = 0.0


@dataclass(slots=True)
class FocusReportUpdated(Event):
    """The focus report was recomputed; ``report`` is ``None`` outside sections."""

    position: int
    report: "SectionReport | None"


@dataclass(slots=True)
class SettingsChanged(Event):
    settings: Any


# High-frequency event types that should not log each publish
_QUIET_EVENT_TYPES: set[type] = {DocumentChanged, FocusMoved}


class EventBus(Generic[E]):
    """A typed publish-subscribe event bus.

    Handlers are invoked synchronously in registration order. Bound methods
    are held through weak references so that discarded surfaces drop out on
    their own. A handler that raises is logged and the remaining handlers
    still run.

    Not thread-safe; publish from the host's event-loop thread.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: DefaultDict[type[Event], list[_HandlerRef]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        self._handlers[event_type].append(_HandlerRef.create(handler))
        logger.debug("Subscribed handler %s to event type %s", _handler_name(handler), event_type.__name__)

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Remove the first registration of ``handler``; unknown handlers are ignored."""

        handlers = self._handlers.get(event_type)
        if handlers is None:
            return
        for index, handler_ref in enumerate(handlers):
            if handler_ref.matches(handler):
                handlers.pop(index)
                logger.debug(
                    "Unsubscribed handler %s from event type %s",
                    _handler_name(handler),
                    event_type.__name__,
                )
                return

    def publish(self, event: E) -> None:
        event_type = type(event)
        handlers = self._handlers.get(event_type)
        is_quiet = event_type in _QUIET_EVENT_TYPES
        if not handlers:
            if not is_quiet:
                logger.debug("No handlers for event type %s", event_type.__name__)
            return
        if not is_quiet:
            logger.debug("Publishing %s to %d handler(s)", event_type.__name__, len(handlers))

        dead_refs: list[_HandlerRef] = []
        for handler_ref in list(handlers):
            handler = handler_ref.resolve()
            if handler is None:
                dead_refs.append(handler_ref)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s raised exception for event %s",
                    _handler_name(handler),
                    event_type.__name__,
                )
        if dead_refs:
            # The live list may have changed during dispatch; drop dead refs by identity.
            handlers[:] = [ref for ref in handlers if all(ref is not dead for dead in dead_refs)]

    def clear(self) -> None:
        self._handlers.clear()

    def handler_count(self, event_type: type[E] | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())


class _HandlerRef:
    """Weak reference for bound methods, strong reference for plain callables."""

    __slots__ = ("_ref", "_is_weak")

    def __init__(self, handler_ref: Any, is_weak: bool) -> None:
        self._ref = handler_ref
        self._is_weak = is_weak

    @classmethod
    def create(cls, handler: Handler) -> _HandlerRef:
        if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
            try:
                return cls(WeakMethod(handler), is_weak=True)
            except TypeError:
                pass
        return cls(handler, is_weak=False)

    def resolve(self) -> Handler | None:
        if not self._is_weak:
            return self._ref
        return self._ref()

    def matches(self, handler: Handler) -> bool:
        resolved = self.resolve()
        if resolved is None:
            return False
        return resolved == handler


def _handler_name(handler: Handler) -> str:
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return f"{type(handler.__self__).__name__}.{handler.__func__.__name__}"
    if hasattr(handler, "__name__"):
        return handler.__name__
    return repr(handler)


__all__ = [
    "Event",
    "EventBus",
    "Handler",
    "DocumentChanged",
    "FocusMoved",
    "FullReportUpdated",
    "FocusReportUpdated",
    "SettingsChanged",
]
