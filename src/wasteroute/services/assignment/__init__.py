"""Report-to-collector assignment."""

from .balancer import Assignment, AssignmentBatch, AssignmentOptions, auto_assign, order_pending
from .service import run_auto_assign

__all__ = [
    "Assignment",
    "AssignmentBatch",
    "AssignmentOptions",
    "auto_assign",
    "order_pending",
    "run_auto_assign",
]
