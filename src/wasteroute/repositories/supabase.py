"""Supabase-backed repositories for reports and collectors."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import TypeAdapter
from supabase import Client

from ..config import settings
from ..models.domain import Collector, Location, Report, ReportStatus, Urgency, WasteType
from .base import CollectorRepository, ReportRepository

logger = logging.getLogger(__name__)

_TIMESTAMP_FIELDS = ("created_at", "assigned_at", "started_at", "collected_at", "resolved_at")
_TIMESTAMP = TypeAdapter(datetime)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    # PostgREST trims trailing zeros from fractional seconds and may emit "Z"
    return _TIMESTAMP.validate_python(value)


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def report_from_row(row: Mapping[str, Any]) -> Report:
    confirmed = row.get("waste_type_confirmed")
    return Report(
        id=str(row["id"]),
        location=Location(float(row["latitude"]), float(row["longitude"])),
        created_at=_parse_timestamp(row["created_at"]),
        waste_type=WasteType(row.get("waste_type") or WasteType.OTHER.value),
        urgency=Urgency(row.get("urgency") or Urgency.MEDIUM.value),
        status=ReportStatus(row.get("status") or ReportStatus.PENDING.value),
        assigned_collector=row.get("assigned_collector"),
        assigned_at=_parse_timestamp(row.get("assigned_at")),
        started_at=_parse_timestamp(row.get("started_at")),
        collected_at=_parse_timestamp(row.get("collected_at")),
        resolved_at=_parse_timestamp(row.get("resolved_at")),
        description=row.get("description"),
        address=row.get("address"),
        actual_quantity=row.get("actual_quantity"),
        waste_type_confirmed=WasteType(confirmed) if confirmed else None,
        collector_notes=row.get("collector_notes"),
    )


def report_to_row(report: Report) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": report.id,
        "latitude": report.location.latitude,
        "longitude": report.location.longitude,
        "waste_type": report.waste_type.value,
        "urgency": report.urgency.value,
        "status": report.status.value,
        "assigned_collector": report.assigned_collector,
        "description": report.description,
        "address": report.address,
        "actual_quantity": report.actual_quantity,
        "waste_type_confirmed": _serialize_value(report.waste_type_confirmed),
        "collector_notes": report.collector_notes,
    }
    for name in _TIMESTAMP_FIELDS:
        row[name] = _serialize_value(getattr(report, name))
    return row


class SupabaseReportRepository(ReportRepository):
    """Reports stored in a Supabase (PostgREST) table.

    Conditional transitions are a single ``UPDATE ... WHERE id = ? AND status = ?``;
    PostgREST returns the updated rows, so an empty result means the precondition
    no longer held.
    """

    def __init__(self, client: Client, table: str | None = None) -> None:
        self.client = client
        self.table = table or settings.reports_table

    def _query(self):
        return self.client.table(self.table)

    def get(self, report_id: str) -> Optional[Report]:
        response = self._query().select("*").eq("id", report_id).limit(1).execute()
        if not response.data:
            return None
        return report_from_row(response.data[0])

    def add(self, report: Report) -> Report:
        self._query().insert(report_to_row(report)).execute()
        return report

    def find_by_collector(self, collector_id: str) -> list[Report]:
        response = self._query().select("*").eq("assigned_collector", collector_id).execute()
        return [report_from_row(row) for row in (response.data or [])]

    def find_by_statuses(self, statuses: Iterable[ReportStatus]) -> list[Report]:
        values = [status.value for status in statuses]
        if not values:
            return []
        response = self._query().select("*").in_("status", values).execute()
        return [report_from_row(row) for row in (response.data or [])]

    def find_open_by_collector(self, collector_id: str) -> list[Report]:
        response = (
            self._query()
            .select("*")
            .eq("assigned_collector", collector_id)
            .in_("status", [ReportStatus.ASSIGNED.value, ReportStatus.IN_PROGRESS.value])
            .execute()
        )
        return [report_from_row(row) for row in (response.data or [])]

    def count_by_collector_and_status(self, collector_id: str, statuses: Sequence[ReportStatus]) -> int:
        response = (
            self._query()
            .select("id", count="exact")
            .eq("assigned_collector", collector_id)
            .in_("status", [status.value for status in statuses])
            .execute()
        )
        if response.count is not None:
            return response.count
        return len(response.data or [])

    def try_transition(
        self,
        report_id: str,
        from_status: ReportStatus,
        to_status: ReportStatus,
        fields: Mapping[str, Any] | None = None,
    ) -> bool:
        payload = {name: _serialize_value(value) for name, value in (fields or {}).items()}
        payload["status"] = to_status.value
        response = (
            self._query()
            .update(payload)
            .eq("id", report_id)
            .eq("status", from_status.value)
            .execute()
        )
        applied = bool(response.data)
        if not applied:
            logger.debug(f"Conditional update skipped for report {report_id}: status is no longer '{from_status.value}'")
        return applied


class SupabaseCollectorRepository(CollectorRepository):
    def __init__(self, client: Client, table: str | None = None) -> None:
        self.client = client
        self.table = table or settings.collectors_table

    @staticmethod
    def _from_row(row: Mapping[str, Any]) -> Collector:
        return Collector(id=str(row["id"]), name=row.get("name"), active=bool(row.get("is_active", True)))

    def get(self, collector_id: str) -> Optional[Collector]:
        response = self.client.table(self.table).select("*").eq("id", collector_id).limit(1).execute()
        if not response.data:
            return None
        return self._from_row(response.data[0])

    def add(self, collector: Collector) -> Collector:
        if self.get(collector.id) is not None:
            raise ValueError(f"Collector {collector.id} already exists.")
        self.client.table(self.table).insert(
            {"id": collector.id, "name": collector.name, "is_active": collector.active}
        ).execute()
        return collector

    def find_active(self) -> list[Collector]:
        response = self.client.table(self.table).select("*").eq("is_active", True).order("id").execute()
        return [self._from_row(row) for row in (response.data or [])]

    def set_active(self, collector_id: str, active: bool) -> Optional[Collector]:
        response = self.client.table(self.table).update({"is_active": active}).eq("id", collector_id).execute()
        if not response.data:
            return None
        return self._from_row(response.data[0])
