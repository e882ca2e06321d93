"""Line-oriented transformations of a "Keep a Changelog" document.

A changelog is handled as a list of lines. Headers are recognised by their
prefix only: ``## `` starts a section, ``### `` a subsection. The section
titled ``Unreleased`` collects the notes for the next release.

Each transformation is a separate pass over the full line list and returns
a new list, so the passes can be tested and composed independently:

- :func:`prune_empty_subsections` drops Unreleased subsections without content
- :func:`extract_release_notes` returns the body of the Unreleased section
- :func:`normalize_header_spacing` puts two blank lines before every section
- :func:`rename_unreleased` turns ``Unreleased`` into ``<version> - <date>``
- :func:`reopen_unreleased` adds a fresh, empty Unreleased section
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from enum import Enum, auto
from typing import TYPE_CHECKING

from release_ip.exceptions import MissingUnreleasedSectionError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from release_ip.core.version import Version

UNRELEASED = "Unreleased"
DEFAULT_SUBSECTIONS = ("Added", "Changed", "Fixed")
BLANKS_BEFORE_SECTION = 2

_UNRELEASED_HEADER_RE = re.compile(r"^## \[?Unreleased\]?\s*$")


class Section(Enum):
    """Where a line sits relative to the Unreleased section."""

    OUTSIDE = auto()
    IN_UNRELEASED = auto()
    IN_SUBSECTION = auto()


def is_blank(line: str) -> bool:
    return not line.strip()


def is_section_header(line: str) -> bool:
    return line.startswith("## ")


def is_subsection_header(line: str) -> bool:
    return line.startswith("### ")


def is_unreleased_header(line: str) -> bool:
    return bool(_UNRELEASED_HEADER_RE.match(line))


def parse_lines(text: str) -> list[str]:
    """Split changelog text into lines without line terminators."""
    return text.splitlines()


def render_lines(lines: Sequence[str]) -> str:
    """Join lines back into text ending with a single newline."""
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def render_notes(notes: Sequence[str]) -> str:
    return "\n".join(notes)


def find_unreleased(lines: Sequence[str]) -> int:
    """Return the index of the ``## Unreleased`` header.

    Raises:
        MissingUnreleasedSectionError: If the document has no such header
    """
    for index, line in enumerate(lines):
        if is_unreleased_header(line):
            return index
    raise MissingUnreleasedSectionError("Changelog has no '## Unreleased' section")


# Pruning


@dataclass(frozen=True)
class _PruneState:
    section: Section = Section.OUTSIDE
    pending: str | None = None
    content_started: bool = False


def _prune_step(state: _PruneState, line: str) -> tuple[_PruneState, list[str]]:
    # A section header always closes the current section first, then opens
    # Unreleased if it is that header.
    if is_section_header(line):
        if is_unreleased_header(line):
            return _PruneState(Section.IN_UNRELEASED), [line]
        return _PruneState(), [line]

    if state.section is Section.OUTSIDE:
        return state, [line]

    if is_subsection_header(line):
        return _PruneState(Section.IN_SUBSECTION, pending=line), []

    if state.content_started:
        return state, [line]

    if is_blank(line):
        return state, []

    emitted = [line] if state.pending is None else [state.pending, line]
    return replace(state, pending=None, content_started=True), emitted


def prune_empty_subsections(lines: Iterable[str]) -> list[str]:
    """Drop Unreleased subsections that have no non-blank body line.

    Subsection headers are held back until the first line of content shows
    up. Blank lines before that first line are dropped; once content has
    started every line, blank or not, is kept. Lines outside the Unreleased
    section pass through unchanged.
    """
    state = _PruneState()
    result: list[str] = []
    for line in lines:
        state, emitted = _prune_step(state, line)
        result.extend(emitted)
    return result


# Release notes


def extract_release_notes(lines: Sequence[str]) -> list[str]:
    """Return the lines strictly inside the Unreleased section.

    Leading and trailing blank lines are trimmed, blank lines between
    entries are kept.

    Raises:
        MissingUnreleasedSectionError: If there is no Unreleased section
    """
    start = find_unreleased(lines) + 1
    end = next(
        (index for index in range(start, len(lines)) if is_section_header(lines[index])),
        len(lines),
    )
    body = list(lines[start:end])

    while body and is_blank(body[0]):
        body.pop(0)
    while body and is_blank(body[-1]):
        body.pop()
    return body


# Spacing


def _trailing_blank_count(lines: Sequence[str]) -> int:
    count = 0
    for line in reversed(lines):
        if not is_blank(line):
            break
        count += 1
    return count


def normalize_header_spacing(lines: Iterable[str]) -> list[str]:
    """Ensure exactly two blank lines before every ``## `` header.

    A header on the first line of the document is left alone.
    """
    result: list[str] = []
    for line in lines:
        if is_section_header(line) and result:
            blanks = _trailing_blank_count(result)
            if blanks < BLANKS_BEFORE_SECTION:
                result.extend([""] * (BLANKS_BEFORE_SECTION - blanks))
            elif blanks > BLANKS_BEFORE_SECTION:
                del result[len(result) - (blanks - BLANKS_BEFORE_SECTION) :]
        result.append(line)
    return result


# Renaming


def release_heading(version: Version | str, today: date | None = None) -> str:
    """Return ``"<version> - <YYYY-MM-DD>"`` using today's UTC date by default."""
    day = today or datetime.now(UTC).date()
    return f"{version} - {day.isoformat()}"


def rename_unreleased(
    lines: Sequence[str],
    version: Version | str,
    today: date | None = None,
) -> list[str]:
    """Replace ``Unreleased`` in the section header with the release heading.

    Raises:
        MissingUnreleasedSectionError: If there is no Unreleased section
    """
    index = find_unreleased(lines)
    result = list(lines)
    result[index] = lines[index].replace(UNRELEASED, release_heading(version, today), 1)
    return result


# Reopening


def unreleased_block(subsections: Sequence[str] = DEFAULT_SUBSECTIONS) -> list[str]:
    block = [f"## {UNRELEASED}"]
    for title in subsections:
        block.extend(["", f"### {title}"])
    block.extend([""] * BLANKS_BEFORE_SECTION)
    return block


def reopen_unreleased(
    lines: Sequence[str],
    subsections: Sequence[str] = DEFAULT_SUBSECTIONS,
    *,
    after_line: int | None = None,
) -> list[str]:
    """Insert an empty Unreleased section for the next development cycle.

    The section goes right before the first ``## `` header, i.e. at the end
    of the document header. With ``after_line`` it is inserted after that
    many lines instead. A document that already has an Unreleased section is
    returned unchanged.
    """
    if any(is_unreleased_header(line) for line in lines):
        return list(lines)

    if after_line is not None:
        position = min(max(after_line, 0), len(lines))
    else:
        position = next(
            (index for index, line in enumerate(lines) if is_section_header(line)),
            len(lines),
        )

    result = [*lines[:position], *unreleased_block(subsections), *lines[position:]]
    return normalize_header_spacing(result)


def prepare_release(
    lines: Sequence[str],
    version: Version | str,
    today: date | None = None,
) -> tuple[list[str], list[str]]:
    """Run the full-release passes: prune, extract, normalize, rename.

    Returns:
        The rewritten changelog lines and the release notes lines
    """
    pruned = prune_empty_subsections(lines)
    notes = extract_release_notes(pruned)
    spaced = normalize_header_spacing(pruned)
    return rename_unreleased(spaced, version, today), notes
