"""Split a multi-file unified diff into per-file sections.

A section starts at each ``diff --git a/<path> b/<path>`` header and runs until the
next header or the end of the input.  Text before the first header (for example
the commit header printed by ``git show``) belongs to no section.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

SECTION_HEADER = re.compile(r"^diff --git (a/.+) (b/.+)$")

_SIDE_PREFIXES = ("a/", "b/")


@dataclass(frozen=True)
class FilePatch:
    """One file's section of a diff.

    Attributes:
        a_path: Left side path as written in the header, ``a/`` prefix included
        b_path: Right side path as written in the header, ``b/`` prefix included
        patch: Section text, header line included, lines joined with ``\\n``
    """

    a_path: str
    b_path: str
    patch: str


def strip_side_prefix(path: str) -> str:
    """Remove one conventional ``a/`` or ``b/`` prefix."""
    if path.startswith(_SIDE_PREFIXES):
        return path[2:]
    return path


def split_sections(diff_text: str) -> list[FilePatch]:
    """Split diff text into FilePatch sections, in input order."""
    sections: list[FilePatch] = []
    current: tuple[str, str] | None = None
    buffer: list[str] = []

    def close() -> None:
        if current is not None:
            sections.append(FilePatch(current[0], current[1], "\n".join(buffer)))

    for line in diff_text.split("\n"):
        header = SECTION_HEADER.match(line)
        if header:
            close()
            current = (header.group(1), header.group(2))
            buffer = [line]
        elif current is not None:
            buffer.append(line)

    close()
    return sections


def index_patches(sections: list[FilePatch]) -> dict[str, str]:
    """Map both stripped paths of every section to its text.

    When two sections claim the same key the later one wins.
    """
    index: dict[str, str] = {}
    for section in sections:
        for key in (strip_side_prefix(section.a_path), strip_side_prefix(section.b_path)):
            if key:
                index[key] = section.patch
    return index


def split_patches(diff_text: str) -> dict[str, str]:
    """Split ``diff_text`` and index the sections by path.

    Args:
        diff_text: Output of ``git show`` or ``git diff``

    Returns:
        Mapping of path (without ``a/``/``b/``) to that file's patch text
    """
    return index_patches(split_sections(diff_text))
