"""Line-oriented marker lexer.

Each line is classified into one of three states:

* ``NO_MATCH`` -- no comment leader followed by a recognized tag.
* ``UNASSIGNED`` -- a marker without a valid ``[id:<token>]`` annotation.
* ``ASSIGNED`` -- a marker whose trailing annotation carries a valid token.

The grammar is ``<leader> <tag> [:|whitespace] <free text> [[id:<token>]]``
where the annotation must sit at the end of the line.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from functools import lru_cache

from todosync.contracts.enums import MarkerKind
from todosync.contracts.marker import Marker

logger = logging.getLogger(__name__)

DEFAULT_LEADERS: tuple[str, ...] = ("//", "#")
DEFAULT_LIMIT = 50

# Any trailing [id:...] block, valid or not. Validity is decided by _TOKEN_RE.
ANNOTATION_RE = re.compile(r"\s*\[id:(?P<token>[^\]\s]*)\]\s*$", re.IGNORECASE)
_TOKEN_RE = re.compile(r"[0-9a-z-]+")


class LineState(StrEnum):
    NO_MATCH = "no-match"
    UNASSIGNED = "unassigned"
    ASSIGNED = "assigned"


@dataclass(frozen=True)
class LineScan:
    """Result of lexing a single line."""

    state: LineState
    kind: MarkerKind | None = None
    text: str = ""
    marker_id: str | None = None
    text_start: int = -1
    text_end: int = -1

    @property
    def is_marker(self) -> bool:
        return self.state is not LineState.NO_MATCH


_NO_MATCH = LineScan(state=LineState.NO_MATCH)


@lru_cache(maxsize=32)
def tag_pattern(leaders: tuple[str, ...]) -> re.Pattern[str]:
    """Compile the ``<leader> <tag> <separator>`` pattern for *leaders*."""
    # Longest leader first so "///" is not read as "//" followed by text.
    leader_alt = "|".join(re.escape(leader) for leader in sorted(set(leaders), key=len, reverse=True))
    tags = "|".join(kind.value for kind in MarkerKind)
    return re.compile(rf"(?:{leader_alt})\s*(?P<tag>{tags})(?=[\s:]|$)[\s:]*", re.IGNORECASE)


def is_valid_token(token: str) -> bool:
    return _TOKEN_RE.fullmatch(token) is not None


def scan_line(line: str, leaders: Sequence[str] = DEFAULT_LEADERS) -> LineScan:
    """Classify *line* and pull out its marker parts."""
    match = tag_pattern(tuple(leaders)).search(line)
    if match is None:
        return _NO_MATCH

    text_start = match.end()
    text_end = len(line)
    marker_id: str | None = None
    annotation = ANNOTATION_RE.search(line, text_start)
    if annotation is not None:
        text_end = annotation.start()
        token = annotation.group("token")
        if is_valid_token(token):
            marker_id = token

    raw = line[text_start:text_end]
    stripped_start = text_start + (len(raw) - len(raw.lstrip()))
    return LineScan(
        state=LineState.ASSIGNED if marker_id else LineState.UNASSIGNED,
        kind=MarkerKind.parse(match.group("tag")),
        text=raw.strip(),
        marker_id=marker_id,
        text_start=stripped_start,
        text_end=stripped_start + len(raw.strip()),
    )


def extract_markers(
    lines: Iterable[str],
    path: str,
    *,
    leaders: Sequence[str] = DEFAULT_LEADERS,
    limit: int = DEFAULT_LIMIT,
) -> list[Marker]:
    """Return the markers found in *lines*, in line order, at most *limit*."""
    markers: list[Marker] = []
    for index, line in enumerate(lines):
        scan = scan_line(line, leaders)
        if not scan.is_marker:
            continue
        if len(markers) >= limit:
            logger.debug("Reached marker limit of %d in %s; remaining lines skipped", limit, path)
            break
        markers.append(
            Marker(
                id=scan.marker_id,
                text=scan.text,
                kind=scan.kind or MarkerKind.TODO,
                path=path,
                line=index,
            )
        )
    logger.debug("Extracted %d markers from %s", len(markers), path)
    return markers
