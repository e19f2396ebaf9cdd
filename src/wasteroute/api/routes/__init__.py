"""Route group exports."""

from . import assignments, collectors, health, reports

__all__ = ["assignments", "collectors", "health", "reports"]
