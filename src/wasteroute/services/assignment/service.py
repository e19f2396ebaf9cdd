"""Auto-assignment orchestration service."""

from __future__ import annotations

import logging

from ...clock import Clock
from ...persistence.filesystem import FileStorage
from ...repositories.base import CollectorRepository, ReportRepository
from ..outputs.formatter import assignment_batch_to_csv, assignment_batch_to_json
from .balancer import AssignmentBatch, AssignmentOptions, auto_assign

logger = logging.getLogger(__name__)


def run_auto_assign(
    reports: ReportRepository,
    collectors: CollectorRepository,
    options: AssignmentOptions,
    *,
    clock: Clock | None = None,
    persist: bool = False,
) -> tuple[AssignmentBatch, dict]:
    """Assign every pending report and optionally write the run to disk.

    Returns the batch and a metadata dict (with ``output_dir`` when persisted).
    """

    pending = reports.find_pending()
    active = collectors.find_active()
    batch = auto_assign(reports, pending, active, options, clock=clock)

    metadata: dict = {
        "pending_before": len(pending),
        "active_collectors": len(active),
    }
    if persist and batch.assignments:
        run_dir = FileStorage().save_run(
            "assign",
            {
                "summary.json": assignment_batch_to_json(batch),
                "assignments.csv": assignment_batch_to_csv(batch),
            },
        )
        metadata["output_dir"] = str(run_dir)
        logger.info(f"Persisted auto-assign run to {run_dir}")
    return batch, metadata
