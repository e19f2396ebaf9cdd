"""Collector request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Collector
from .reports import ReportModel


class CollectorModel(BaseModel):
    id: str
    name: Optional[str] = None
    active: bool = True

    @classmethod
    def from_collector(cls, collector: Collector) -> "CollectorModel":
        return cls(id=collector.id, name=collector.name, active=collector.active)

    def to_collector(self) -> Collector:
        return Collector(id=self.id, name=self.name, active=self.active)


class CollectorStatusRequest(BaseModel):
    active: bool


class CollectorStatusResponse(BaseModel):
    message: str
    collector: CollectorModel
    released_report_ids: List[str] = Field(default_factory=list)


class PickupHistoryResponse(BaseModel):
    collector_id: str
    items: List[ReportModel]
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
