"""Report and collector storage backends."""

from .base import CollectorRepository, ReportRepository
from .memory import InMemoryCollectorRepository, InMemoryReportRepository

__all__ = [
    "ReportRepository",
    "CollectorRepository",
    "InMemoryReportRepository",
    "InMemoryCollectorRepository",
]
