"""Heuristic complexity scoring for test files.

The score is a rough estimate of a test file's relative execution cost,
derived from its path and (when readable) its content. It is not a parser:
keyword hits only ever raise the score, except the single decrement for
unit tests, and the result is never below ``MIN_SCORE``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# ── Constants ─────────────────────────────────────────────────────

MIN_SCORE = 1

MAX_CONTENT_BYTES = 10 * 1024 * 1024
"""Files larger than this are scored from their path only."""

_LARGE_CONTENT_CHARS = 5000
_MANY_TESTS = 20
_SOME_TESTS = 10

_PATH_PROPERTY = ("property", "proptest", "propertytest")
_PATH_INTEGRATION = ("integration", "container", "e2e", "endtoend")
_PATH_UNIT = ("unit", "unittest")

_TEST_MARKER_RE = re.compile(r"\b(?:test|it|describe)\s*\(")


# ── Data models ───────────────────────────────────────────────────


@dataclass(slots=True)
class ContentRead:
    """Outcome of a best-effort test file read."""

    content: str | None = None
    """Lower-cased file content, or None when the read was skipped."""

    reason: str = ""
    """Why content is unavailable (empty on success)."""

    @property
    def ok(self) -> bool:
        """Return True when content was read."""
        return self.content is not None


@dataclass(slots=True)
class ComplexityScore:
    """Complexity score for a single test file."""

    file_path: str
    """Path to the test file."""

    score: int = MIN_SCORE
    """Heuristic cost estimate (>= 1)."""

    degraded_reason: str = ""
    """Why content analysis was skipped (empty when content was scored)."""

    @property
    def degraded(self) -> bool:
        """Return True when the score is path-only."""
        return bool(self.degraded_reason)


# ── Public API ────────────────────────────────────────────────────


def read_test_content(path: str | Path, base_dir: str | Path | None = None) -> ContentRead:
    """Read a test file for content analysis, guarding size and location.

    Relative paths are resolved against *base_dir* (default: the current
    directory). Paths resolving outside *base_dir* are rejected without
    being opened, as are files larger than ``MAX_CONTENT_BYTES``.
    """
    try:
        base = Path(base_dir).resolve() if base_dir is not None else Path.cwd().resolve()
        candidate = (base / path).resolve()
    except (OSError, ValueError) as e:
        logger.debug("Could not resolve test file %s: %s", path, e)
        return ContentRead(reason=f"unreadable: {e}")

    if not candidate.is_relative_to(base):
        logger.warning("Skipping content analysis for %s: path escapes %s", path, base)
        return ContentRead(reason="path escapes base directory")

    try:
        size = candidate.stat().st_size
    except (OSError, ValueError) as e:
        logger.debug("Could not stat test file %s: %s", path, e)
        return ContentRead(reason=f"unreadable: {e}")

    if size > MAX_CONTENT_BYTES:
        logger.warning(
            "Skipping content analysis for %s: %d bytes exceeds %d byte limit",
            path,
            size,
            MAX_CONTENT_BYTES,
        )
        return ContentRead(reason="file too large")

    try:
        text = candidate.read_text(encoding="utf-8", errors="ignore")
    except (OSError, ValueError) as e:
        logger.debug("Could not read test file %s: %s", path, e)
        return ContentRead(reason=f"unreadable: {e}")

    return ContentRead(content=text.lower())


def score_path(path: str | Path) -> int:
    """Score a test file from its path alone."""
    name = str(path).lower()
    score = MIN_SCORE

    if any(marker in name for marker in _PATH_PROPERTY):
        score += 3
    if any(marker in name for marker in _PATH_INTEGRATION):
        score += 4
    if any(marker in name for marker in _PATH_UNIT):
        score = max(score - 1, MIN_SCORE)

    return score


def score_content(content: str) -> int:
    """Return the score adjustment for lower-cased file *content*."""
    bonus = 0

    if "property" in content or "proptest" in content:
        bonus += 2
    if "container" in content:
        bonus += 3
    if "integration" in content:
        bonus += 2

    test_count = len(_TEST_MARKER_RE.findall(content))
    if test_count > _MANY_TESTS:
        bonus += 2
    elif test_count > _SOME_TESTS:
        bonus += 1

    if len(content) > _LARGE_CONTENT_CHARS:
        bonus += 1

    return bonus


def assess_complexity(path: str | Path, base_dir: str | Path | None = None) -> ComplexityScore:
    """Score a test file and report whether content analysis was skipped.

    Path keywords and content keywords are scored independently, so a
    property test named ``PropertyTest`` that also mentions ``property``
    in its body is counted twice.

    Args:
        path: Test file path, relative to *base_dir* or absolute.
        base_dir: Directory content reads are confined to.

    Returns:
        ComplexityScore with a score >= ``MIN_SCORE``.
    """
    score = score_path(path)

    read = read_test_content(path, base_dir)
    if read.content is not None:
        score += score_content(read.content)

    return ComplexityScore(
        file_path=str(path),
        score=max(score, MIN_SCORE),
        degraded_reason=read.reason,
    )


def estimate_complexity(path: str | Path, base_dir: str | Path | None = None) -> int:
    """Estimate the relative execution cost of a test file (always >= 1)."""
    return assess_complexity(path, base_dir).score
