"""Domain exceptions raised by the routing and assignment engine."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for engine failures reported to callers."""


class InvalidCoordinates(EngineError, ValueError):
    """Latitude or longitude outside the WGS84 range."""

    def __init__(self, latitude: float, longitude: float):
        super().__init__(
            f"Invalid coordinates ({latitude}, {longitude}). "
            "Latitude must be between -90 and 90, longitude between -180 and 180."
        )
        self.latitude = latitude
        self.longitude = longitude


class InvalidTransition(EngineError):
    """A report status change whose precondition does not hold."""

    def __init__(self, report_id: str, current: str | None, target: str):
        super().__init__(f"Report {report_id} cannot move from '{current}' to '{target}'.")
        self.report_id = report_id
        self.current = current
        self.target = target


class Forbidden(EngineError):
    """The acting collector is not the one assigned to the report."""

    def __init__(self, report_id: str, actor_id: str):
        super().__init__(f"Collector {actor_id} is not assigned to report {report_id}.")
        self.report_id = report_id
        self.actor_id = actor_id


class ReportNotFound(EngineError, LookupError):
    def __init__(self, report_id: str):
        super().__init__(f"Report {report_id} not found.")
        self.report_id = report_id


class CollectorNotFound(EngineError, LookupError):
    def __init__(self, collector_id: str):
        super().__init__(f"Collector {collector_id} not found.")
        self.collector_id = collector_id
