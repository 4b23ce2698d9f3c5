"""Host integration: events, monitor and report renderings."""

from .events import EventBus
from .monitor import ReportSurface, ReviewCountMonitor

__all__ = ["EventBus", "ReportSurface", "ReviewCountMonitor"]
