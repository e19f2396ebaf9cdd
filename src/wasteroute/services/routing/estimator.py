"""Per-stop collection time estimates."""

from __future__ import annotations

from ...models.domain import Report, Urgency, WasteType

BASE_COLLECTION_MINUTES = 15

WASTE_TYPE_EXTRA_MINUTES = {
    WasteType.HAZARDOUS: 20,
    WasteType.ELECTRONIC: 10,
    WasteType.MIXED: 5,  # sorting on site
}

URGENCY_EXTRA_MINUTES = {
    Urgency.CRITICAL: 10,
    Urgency.HIGH: 5,
}


def estimate_collection_minutes(report: Report) -> int:
    """Minutes spent on site for a report, from its waste type and urgency."""

    return (
        BASE_COLLECTION_MINUTES
        + WASTE_TYPE_EXTRA_MINUTES.get(report.waste_type, 0)
        + URGENCY_EXTRA_MINUTES.get(report.urgency, 0)
    )
