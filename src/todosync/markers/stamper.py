"""Identifier assignment and marker line rewriting.

Everything here is pure: it computes the rewritten lines, and the
:class:`~todosync.engine.applier.MutationApplier` writes them to a buffer.
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

from todosync.contracts.marker import Marker
from todosync.markers.extractor import ANNOTATION_RE, DEFAULT_LEADERS, scan_line

logger = logging.getLogger(__name__)

_NEWLINES_RE = re.compile(r"[\r\n]+")


@dataclass(frozen=True)
class LineEdit:
    line: int
    text: str
    marker_id: str


@dataclass
class StampPlan:
    """Markers with every identifier filled in, plus the edits that embed them."""

    markers: list[Marker] = field(default_factory=list)
    edits: list[LineEdit] = field(default_factory=list)

    @property
    def stamped_ids(self) -> list[str]:
        return [edit.marker_id for edit in self.edits]


def generate_marker_id() -> str:
    """Return a fresh identifier (lowercase hex and hyphens)."""
    return str(uuid.uuid4())


def stamp_line(line: str, marker_id: str) -> str:
    """Embed ``[id:<marker_id>]`` at the end of *line*, replacing any prior annotation."""
    annotation = ANNOTATION_RE.search(line)
    base = line[: annotation.start()] if annotation is not None else line
    return f"{base.rstrip()} [id:{marker_id}]"


def rewrite_text(line: str, new_text: str, leaders: Sequence[str] = DEFAULT_LEADERS) -> str:
    """Replace the free text of the marker on *line*, keeping its tag and identifier.

    Raises:
        ValueError: If *line* does not hold a marker.
    """
    scan = scan_line(line, leaders)
    if not scan.is_marker:
        raise ValueError(f"not a marker line: {line!r}")

    prefix = line[: scan.text_start]
    if prefix and not prefix[-1].isspace():
        prefix += " "
    text = _NEWLINES_RE.sub(" ", new_text).strip()
    rewritten = f"{prefix}{text}".rstrip()
    if not scan.marker_id:
        return rewritten
    # Only the last annotation is read back as the id, so earlier ones stay text.
    return f"{rewritten} [id:{scan.marker_id}]"


def plan_stamps(markers: Sequence[Marker], lines: Sequence[str]) -> StampPlan:
    """Assign identifiers to unassigned markers and compute the line edits.

    A marker repeating an identifier already seen earlier in the same buffer
    (a copied line) is a new marker and gets a fresh identifier.
    """
    plan = StampPlan()
    seen: set[str] = set()
    for marker in markers:
        if marker.id and marker.id not in seen:
            seen.add(marker.id)
            plan.markers.append(marker)
            continue

        if marker.id:
            logger.info("Duplicate marker id %s at %s:%d; assigning a new id", marker.id, marker.path, marker.line_number)
        marker_id = generate_marker_id()
        seen.add(marker_id)
        plan.markers.append(marker.model_copy(update={"id": marker_id}))
        plan.edits.append(LineEdit(line=marker.line, text=stamp_line(lines[marker.line], marker_id), marker_id=marker_id))
        logger.debug("Generated marker id %s for %s:%d", marker_id, marker.path, marker.line_number)
    return plan
