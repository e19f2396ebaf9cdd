"""Collector activation and the release of their open work."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from ..errors import CollectorNotFound
from ..models.domain import Collector
from ..repositories.base import CollectorRepository, ReportRepository
from .lifecycle import release_report

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CollectorStatusChange:
    collector: Collector
    released_report_ids: List[str] = field(default_factory=list)


def set_collector_active(
    reports: ReportRepository,
    collectors: CollectorRepository,
    collector_id: str,
    active: bool,
) -> CollectorStatusChange:
    """Activate or deactivate a collector.

    Deactivation returns every ``assigned`` and ``in_progress`` report of the
    collector to ``pending`` so the next auto-assign run can hand them out again.
    """

    collector = collectors.set_active(collector_id, active)
    if collector is None:
        raise CollectorNotFound(collector_id)

    change = CollectorStatusChange(collector=collector)
    if active:
        logger.info(f"Collector {collector_id} activated")
        return change

    for report in sorted(reports.find_open_by_collector(collector_id), key=lambda r: r.id):
        if release_report(reports, report):
            change.released_report_ids.append(report.id)
    logger.info(f"Collector {collector_id} deactivated; released {len(change.released_report_ids)} reports")
    return change
