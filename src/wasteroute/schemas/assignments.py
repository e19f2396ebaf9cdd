"""Assignment request/response schemas."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from ..config import settings
from ..services.assignment.balancer import AssignmentOptions


class AutoAssignRequest(BaseModel):
    prioritize_proximity: bool = Field(
        default=True,
        description="Accepted for compatibility; does not change candidate ordering yet.",
    )
    balance_workload: bool = True
    consider_urgency: bool = True
    max_assignments_per_collector: int = Field(
        default_factory=lambda: settings.default_max_assignments_per_collector,
        ge=1,
    )
    persist: bool = Field(default=False, description="Write summary.json and assignments.csv for this run.")

    def to_options(self) -> AssignmentOptions:
        return AssignmentOptions(
            consider_urgency=self.consider_urgency,
            balance_workload=self.balance_workload,
            max_assignments_per_collector=self.max_assignments_per_collector,
            prioritize_proximity=self.prioritize_proximity,
        )


class AssignmentModel(BaseModel):
    report_id: str
    collector_id: str


class AutoAssignResponse(BaseModel):
    message: str
    assigned_count: int
    unassigned: int
    reason: str
    assignments: List[AssignmentModel]
    workloads: Dict[str, int]
    settings: Dict[str, object]
    metadata: dict


class AssignReportRequest(BaseModel):
    report_id: str
    collector_id: str
