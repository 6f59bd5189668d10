"""Assemble a RevisionDetail from separately fetched git reports.

Three reports are always fetched for a revision, each parsed on its own:

- header (``git show --no-patch --format=fuller``) -> :func:`parse_header`
- name-status listing (``--name-status``) -> :func:`parse_name_status`
- numstat listing (``--numstat``) -> :func:`parse_numstat`

Name-status and numstat are merged per current path with fill-only-if-absent
semantics (:func:`merge_numstat`), so a rename reported by both becomes one
entry carrying both the old path and the line counts.

Optionally a full diff is fetched too and split per file to attach patches.
Failures while fetching or splitting the diff are logged and never abort the
request: the revision data already assembled is still returned.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from ..config.defaults import DEFAULT_SHORT_HASH_LENGTH
from .models import ChangedFile, RevisionDetail
from .patch_splitter import split_patches

if TYPE_CHECKING:
    from loguru import Logger

RENAME_STATUSES = frozenset({"R", "C"})
BINARY_SENTINEL = "-"

_IDENTITY = re.compile(r"^\s*(.+?)\s*<(.+?)>")
_ZONE_SUFFIX = re.compile(r" ([-+]\d{4})$")
_BRACE_RENAME = re.compile(r"^(.*)\{(.*) => (.*)\}(.*)$")
_BODY_INDENT = "    "


class PatchSource(Protocol):
    """The subset of the git gateway the assembler needs."""

    async def show_full_diff(self, commit_hash: str) -> str: ...

    async def show_patches(self, commit_hash: str) -> str: ...


# --- Header ---


@dataclass
class RevisionHeader:
    """Fields recovered from a ``--format=fuller`` header."""

    hash: str = ""
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
    parent_hashes: list[str] = field(default_factory=list)
    tree_hash: str = ""


def _split_identity(value: str) -> tuple[str, str] | None:
    match = _IDENTITY.match(value)
    if not match:
        return None
    return match.group(1).strip(), match.group(2).strip()


def split_date(value: str) -> tuple[str, str]:
    """Split a date into (time, zone); zone is empty when no offset trails it."""
    value = value.strip()
    zone = _ZONE_SUFFIX.search(value)
    if zone:
        return value[: zone.start()].strip(), zone.group(1)
    return value, ""


def parse_header(text: str) -> RevisionHeader:
    """Parse ``git show --no-patch --format=fuller`` output.

    Message body lines are the ones indented by four spaces.  The first
    non-empty body line is the summary; all body lines, blank ones included,
    form the message.

    Args:
        text: Header text

    Returns:
        RevisionHeader; fields absent from the text stay empty
    """
    header = RevisionHeader()
    body: list[str] = []

    for line in text.split("\n"):
        if line.startswith("commit "):
            header.hash = line[len("commit ") :].strip()
        elif line.startswith("Author: "):
            identity = _split_identity(line[len("Author: ") :])
            if identity:
                header.author, header.author_email = identity
        elif line.startswith("Commit: "):
            identity = _split_identity(line[len("Commit: ") :])
            if identity:
                header.committer, header.committer_email = identity
        elif line.startswith("AuthorDate: "):
            header.author_time, header.author_time_zone = split_date(
                line[len("AuthorDate: ") :]
            )
        elif line.startswith("CommitDate: "):
            header.committer_time, header.committer_time_zone = split_date(
                line[len("CommitDate: ") :]
            )
        elif line.startswith("Merge: "):
            header.parent_hashes = line[len("Merge: ") :].split()
        elif line.startswith("tree "):
            header.tree_hash = line[len("tree ") :].strip()
        elif line.startswith(_BODY_INDENT):
            body_line = line[len(_BODY_INDENT) :]
            if body_line and not header.summary:
                header.summary = body_line.strip()
            body.append(body_line)
        elif not line and body:
            # some git versions drop the indent on blank message lines
            body.append("")

    header.message = "\n".join(body).strip()
    return header


# --- Changed files ---


@dataclass
class PathChange:
    """Working record for one path while the listings are merged."""

    path: str
    status: str = ""
    old_path: str | None = None
    insertions: int | None = None
    deletions: int | None = None

    def to_changed_file(self, patch: str | None = None) -> ChangedFile:
        return ChangedFile(
            status=self.status,
            path=self.path,
            old_path=self.old_path,
            insertions=self.insertions,
            deletions=self.deletions,
            patch=patch,
        )


@dataclass(frozen=True)
class NumstatEntry:
    """One numstat row; counts are None for binary files."""

    path: str
    insertions: int | None
    deletions: int | None
    old_path: str | None = None


def parse_name_status(text: str) -> dict[str, PathChange]:
    """Parse a ``--name-status`` listing into a map keyed by current path.

    Rows look like ``M\\tpath`` or ``R087\\told\\tnew``.  Rows with fewer than two
    fields are skipped.
    """
    changes: dict[str, PathChange] = {}

    for line in text.split("\n"):
        if not line.strip():
            continue
        parts = line.split("\t")
        if len(parts) < 2 or not parts[0]:
            continue

        status = parts[0][0]
        if status in RENAME_STATUSES:
            old_path = parts[1]
            path = parts[2] if len(parts) > 2 and parts[2] else parts[1]
        else:
            old_path = None
            path = parts[1]

        change = changes.get(path) or PathChange(path=path)
        change.status = status
        if old_path is not None:
            change.old_path = old_path
        changes[path] = change

    return changes


def _count(value: str) -> int | None:
    value = value.strip()
    if value == BINARY_SENTINEL or not value.isdigit():
        return None
    return int(value)


def _join_rename_side(prefix: str, middle: str, suffix: str) -> str:
    # "src/{ => sub}/f.py" has an empty side; avoid leaving "src//f.py".
    if not middle and prefix.endswith("/") and suffix.startswith("/"):
        return prefix + suffix[1:]
    return prefix + middle + suffix


def expand_rename(path_field: str) -> tuple[str, str] | None:
    """Expand git's inline rename notation into (old_path, new_path).

    Handles ``old => new`` and ``dir/{old => new}/file``.  Returns None when the
    field is a plain path.
    """
    brace = _BRACE_RENAME.match(path_field)
    if brace:
        prefix, old, new, suffix = brace.groups()
        return (
            _join_rename_side(prefix, old, suffix),
            _join_rename_side(prefix, new, suffix),
        )
    if " => " in path_field:
        old, new = path_field.split(" => ", 1)
        return old, new
    return None


def parse_numstat(text: str) -> list[NumstatEntry]:
    """Parse a ``--numstat`` listing.

    Rows are ``ins\\tdel\\tpath`` or, for renames, ``ins\\tdel\\told\\tnew`` (or the
    inline ``old => new`` form).  ``-`` counts mark binary files.
    """
    entries: list[NumstatEntry] = []

    for line in text.split("\n"):
        if not line.strip():
            continue
        parts = line.split("\t")
        if len(parts) < 3:
            continue

        insertions = _count(parts[0])
        deletions = _count(parts[1])

        if len(parts) >= 4:
            old_path, path = parts[2], parts[3]
        else:
            renamed = expand_rename(parts[2])
            if renamed:
                old_path, path = renamed
            else:
                old_path, path = None, parts[2]

        entries.append(
            NumstatEntry(
                path=path,
                insertions=insertions,
                deletions=deletions,
                old_path=old_path,
            )
        )

    return entries


def merge_numstat(
    changes: dict[str, PathChange], entries: list[NumstatEntry]
) -> dict[str, PathChange]:
    """Left-join numstat rows onto name-status records by current path.

    Counts are filled in; ``old_path`` is only back-filled when name-status left
    it unset; ``status`` is never touched.  Paths only numstat knows about are
    appended with an empty status.  The input map is not modified.

    Args:
        changes: Result of :func:`parse_name_status`
        entries: Result of :func:`parse_numstat`

    Returns:
        New map keyed by current path, name-status order first
    """
    merged = {path: replace(change) for path, change in changes.items()}

    for entry in entries:
        change = merged.get(entry.path) or PathChange(path=entry.path)
        if change.insertions is None:
            change.insertions = entry.insertions
        if change.deletions is None:
            change.deletions = entry.deletions
        if entry.old_path and not change.old_path:
            change.old_path = entry.old_path
        merged[entry.path] = change

    return merged


@dataclass(frozen=True)
class ChangeTotals:
    files_changed: int
    insertions: int
    deletions: int


def summarize(changes: list[PathChange]) -> ChangeTotals:
    """Count files and sum line counts; binary entries add nothing to the sums."""
    return ChangeTotals(
        files_changed=len(changes),
        insertions=sum(c.insertions for c in changes if c.insertions is not None),
        deletions=sum(c.deletions for c in changes if c.deletions is not None),
    )


def _lookup_key(path: str) -> str:
    return path.replace("\\", "/")


def attach_patches(
    changes: list[PathChange], patches: dict[str, str]
) -> dict[str, str]:
    """Match each change to its patch by current path, then by old path.

    Returns:
        Map of current path -> patch text for the changes that matched
    """
    matched: dict[str, str] = {}
    for change in changes:
        patch = patches.get(_lookup_key(change.path))
        if patch is None and change.old_path:
            patch = patches.get(_lookup_key(change.old_path))
        if patch is not None:
            matched[change.path] = patch
    return matched


# --- Assembler ---


@dataclass(frozen=True)
class DiffOptions:
    """Which optional diff data to fetch.

    Per-file patches are produced when either flag is set.
    """

    include_diff: bool = False
    include_file_diffs: bool = False

    @property
    def wants_file_patches(self) -> bool:
        return self.include_diff or self.include_file_diffs


class CommitDetailAssembler:
    """Build a RevisionDetail from header, name-status, numstat and diff text."""

    def __init__(
        self,
        gateway: PatchSource,
        log: Logger | None = None,
        short_hash_length: int = DEFAULT_SHORT_HASH_LENGTH,
    ):
        """Initialize the assembler.

        Args:
            gateway: Source for the optional diff fetches
            log: Logger to report progress and recoverable failures to
            short_hash_length: Length of ``short_hash``
        """
        self.gateway = gateway
        self.log = log or logger.bind(component="commit_detail")
        self.short_hash_length = short_hash_length

    async def assemble(
        self,
        commit_hash: str,
        header_text: str,
        status_text: str,
        numstat_text: str,
        options: DiffOptions | None = None,
    ) -> RevisionDetail:
        """Merge the reports for ``commit_hash`` into one RevisionDetail.

        Args:
            commit_hash: Resolved revision hash; reported as ``hash`` and used for
                the optional diff fetches
            header_text: ``--format=fuller`` header
            status_text: ``--name-status`` listing
            numstat_text: ``--numstat`` listing
            options: Optional diff settings (defaults to no diff)

        Returns:
            RevisionDetail with changed files, totals and any requested diff data
        """
        options = options or DiffOptions()
        started = time.perf_counter()

        header = parse_header(header_text)
        revision_hash = commit_hash
        if header.hash and header.hash != commit_hash:
            self.log.warning(
                f"Header names commit {header.hash!r}, expected {commit_hash}"
            )

        merged = merge_numstat(parse_name_status(status_text), parse_numstat(numstat_text))
        changes = list(merged.values())
        totals = summarize(changes)

        self.log.info(
            f"Parsed commit {revision_hash}: {totals.files_changed} files, "
            f"+{totals.insertions}/-{totals.deletions}"
        )

        diff: str | None = None
        if options.include_diff:
            diff = await self._fetch_diff(revision_hash)

        patches: dict[str, str] = {}
        if options.wants_file_patches:
            patches = await self._collect_patches(revision_hash, changes, diff)

        detail = RevisionDetail(
            hash=revision_hash,
            short_hash=revision_hash[: self.short_hash_length],
            author=header.author,
            author_email=header.author_email,
            author_time=header.author_time,
            author_time_zone=header.author_time_zone,
            committer=header.committer,
            committer_email=header.committer_email,
            committer_time=header.committer_time,
            committer_time_zone=header.committer_time_zone,
            summary=header.summary,
            message=header.message,
            parent_hashes=header.parent_hashes,
            tree_hash=header.tree_hash,
            files_changed=totals.files_changed,
            insertions=totals.insertions,
            deletions=totals.deletions,
            diff=diff,
            changed_files=[
                change.to_changed_file(patches.get(change.path)) for change in changes
            ],
        )

        duration_ms = (time.perf_counter() - started) * 1000
        self.log.debug(f"Assembled commit {revision_hash} in {duration_ms:.1f}ms")
        return detail

    async def _fetch_diff(self, commit_hash: str) -> str | None:
        try:
            self.log.info(f"Fetching diff for {commit_hash}")
            diff = await self.gateway.show_full_diff(commit_hash)
            self.log.info(f"Diff fetched for {commit_hash} ({len(diff)} chars)")
            return diff
        except Exception as e:
            self.log.warning(f"Failed to get diff for {commit_hash}: {e}")
            return None

    async def _collect_patches(
        self, commit_hash: str, changes: list[PathChange], diff: str | None
    ) -> dict[str, str]:
        try:
            source = diff
            if not source:
                self.log.info(f"Fetching per-file patches for {commit_hash}")
                source = await self.gateway.show_patches(commit_hash)
            if not source:
                return {}
            return attach_patches(changes, split_patches(source))
        except Exception as e:
            self.log.warning(f"Failed to compute per-file patches for {commit_hash}: {e}")
            return {}
