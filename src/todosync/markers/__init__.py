"""Marker extraction and identifier stamping."""

from todosync.markers.extractor import LineScan, LineState, extract_markers, scan_line
from todosync.markers.stamper import LineEdit, StampPlan, generate_marker_id, plan_stamps, rewrite_text, stamp_line

__all__ = [
    "LineEdit",
    "LineScan",
    "LineState",
    "StampPlan",
    "extract_markers",
    "generate_marker_id",
    "plan_stamps",
    "rewrite_text",
    "scan_line",
    "stamp_line",
]
