"""Parser for ``git blame --porcelain --line-porcelain`` output.

Line-porcelain output repeats the full metadata block for every blamed line::

    <hash> <orig_line> <final_line> [<num_lines>]
    author <name>
    author-mail <<email>>
    author-time <epoch>
    author-tz <+hhmm>
    committer <name>
    ...
    summary <first line of message>
    [previous <hash> <filename>]
    filename <path>
    \t<line content>

The parser is a two-state machine driven by a pure transition function:

``SCANNING``
    No record is open.  Only a header line does anything (it opens a record);
    everything else is skipped.

``ACCUMULATING``
    A record is open.  Metadata lines fill fields, a new header replaces the
    record, and the tab-prefixed content line finalises it and returns to
    ``SCANNING``.

A record is only ever emitted by its content line, so a header whose content
never arrives (truncated output) is dropped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from loguru import logger

from .models import AttributionLine

HEADER_PATTERN = re.compile(r"^([0-9a-f]{8,40})\s+\d+\s+(\d+)(?:\s+\d+)?", re.IGNORECASE)

CONTENT_DELIMITER = "\t"

# prefix -> AttributionLine field
METADATA_FIELDS: dict[str, str] = {
    "author ": "author",
    "author-mail ": "author_email",
    "author-time ": "author_time",
    "author-tz ": "author_time_zone",
    "committer ": "committer",
    "committer-mail ": "committer_email",
    "committer-time ": "committer_time",
    "committer-tz ": "committer_time_zone",
    "summary ": "summary",
    "filename ": "filename",
}

PREVIOUS_PREFIX = "previous "


class ParserMode(StrEnum):
    SCANNING = "scanning"
    ACCUMULATING = "accumulating"


@dataclass(frozen=True)
class ParserState:
    """Immutable parser state: the mode plus the open record's fields."""

    mode: ParserMode = ParserMode.SCANNING
    record: dict[str, Any] = field(default_factory=dict)

    def with_fields(self, **fields: Any) -> ParserState:
        return ParserState(mode=self.mode, record={**self.record, **fields})


SCANNING = ParserState()


def _open_record(match: re.Match[str]) -> ParserState:
    return ParserState(
        mode=ParserMode.ACCUMULATING,
        record={
            "revision_hash": match.group(1),
            "line_number": int(match.group(2)),
        },
    )


def _split_previous(remainder: str) -> dict[str, str]:
    # Filenames may contain spaces: first token is the hash, the rest is the path.
    tokens = remainder.split(" ")
    return {
        "previous_hash": tokens[0],
        "previous_filename": " ".join(tokens[1:]),
    }


def step(state: ParserState, line: str) -> tuple[ParserState, AttributionLine | None]:
    """Advance the parser by one physical line.

    Args:
        state: Current parser state
        line: One line of porcelain output, without its trailing newline

    Returns:
        Tuple of (next state, finalised record or None)
    """
    if not line:
        return state, None

    header = HEADER_PATTERN.match(line)
    if header:
        if state.mode is ParserMode.ACCUMULATING:
            logger.debug(
                f"Dropping blame record for line {state.record.get('line_number')} "
                "without content"
            )
        return _open_record(header), None

    if state.mode is ParserMode.SCANNING:
        return state, None

    if line.startswith(CONTENT_DELIMITER):
        record = AttributionLine(**state.record, content=line[1:])
        return SCANNING, record

    if line.startswith(PREVIOUS_PREFIX):
        return state.with_fields(**_split_previous(line[len(PREVIOUS_PREFIX) :])), None

    for prefix, field_name in METADATA_FIELDS.items():
        if line.startswith(prefix):
            return state.with_fields(**{field_name: line[len(prefix) :]}), None

    # Unknown keys such as "boundary" carry nothing we report.
    return state, None


def iter_blame_records(lines: Iterable[str]) -> Iterable[AttributionLine]:
    """Fold ``step`` over ``lines``, yielding records as they are finalised."""
    state = SCANNING
    for line in lines:
        state, record = step(state, line)
        if record is not None:
            yield record

    if state.mode is ParserMode.ACCUMULATING:
        logger.debug(
            f"Blame output ended inside record for line {state.record.get('line_number')}; "
            "record dropped"
        )


def parse_blame_porcelain(raw_text: str) -> list[AttributionLine]:
    """Parse line-porcelain blame output into ordered attribution records.

    Only ``\\n`` separates lines, so a ``\\r`` at the end of a CRLF source line
    stays part of that line's content.

    Args:
        raw_text: Unmodified stdout of ``git blame --porcelain --line-porcelain``

    Returns:
        One AttributionLine per complete header/metadata/content group, in input order
    """
    return list(iter_blame_records(raw_text.split("\n")))
