"""Data models for blame and revision-detail results.

Every model serialises with camelCase keys (``lineNumber``, ``revisionHash``,
``changedFiles`` ...) so tool output matches what MCP clients expect, while Python
code uses snake_case attribute names.  Results are frozen: they are built fresh per
request and never mutated after being returned.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise with camelCase keys, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


# --- Blame ---


class AttributionLine(_CamelModel):
    """History of one line of the current file."""

    line_number: int = Field(..., description="1-based line number in the current file")
    revision_hash: str = Field(..., description="Revision that last changed the line")
    author: str = ""
    author_email: str = ""
    author_time: str = Field(default="", description="Epoch seconds, kept as text")
    author_time_zone: str = Field(default="", description="Signed offset such as +0200")
    committer: str = ""
    committer_email: str = ""
    committer_time: str = ""
    committer_time_zone: str = ""
    summary: str = ""
    previous_hash: str | None = None
    previous_filename: str | None = None
    filename: str = ""
    content: str = Field(..., description="Line text exactly as blamed, minus the tab")


class LineRange(_CamelModel):
    """Effective inclusive window applied to a blame result."""

    start: int = Field(..., alias="from")
    end: int = Field(..., alias="to")


class BlameResult(_CamelModel):
    """Response for a blame query."""

    file_path: str
    total_lines: int = Field(..., ge=0)
    requested_lines: int = Field(..., ge=0)
    line_range: LineRange
    blame: list[AttributionLine] = Field(default_factory=list)


# --- Revision detail ---


class ChangedFile(_CamelModel):
    """One path's change within a revision.

    ``insertions``/``deletions`` are ``None`` (not zero) for binary changes.
    """

    status: str = Field(default="", description="Single-letter change kind (A, M, D, R, C, T, U ...)")
    path: str
    old_path: str | None = None
    insertions: int | None = Field(default=None, ge=0)
    deletions: int | None = Field(default=None, ge=0)
    patch: str | None = None


class RevisionDetail(_CamelModel):
    """One revision's summary, stats and optional diff."""

    hash: str
    short_hash: str
    author: str = ""
    author_email: str = ""
    author_time: str = ""
    author_time_zone: str = ""
    committer: str = ""
    committer_email: str = ""
    committer_time: str = ""
    committer_time_zone: str = ""
    summary: str = ""
    message: str = ""
    parent_hashes: list[str] = Field(default_factory=list)
    tree_hash: str = ""
    files_changed: int = Field(default=0, ge=0)
    insertions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    diff: str | None = None
    changed_files: list[ChangedFile] = Field(default_factory=list)


# --- Requests ---


class BlameRequest(_CamelModel):
    """Arguments of the ``git_blame`` tool."""

    file_path: str
    line_from: int | None = Field(default=None, ge=1)
    line_to: int | None = Field(default=None, ge=1)


class RevisionDetailRequest(_CamelModel):
    """Arguments of the ``git_commit_detail`` tool."""

    commit_hash: str
    file_path: str
    include_diff: bool = False
    include_file_diffs: bool = False
