"""
Version parsing and ordering for registry version strings.

Versions have a dotted numeric core of one to four segments
(major[.minor[.patch[.revision]]]) and an optional prerelease tag after the
first dash, e.g. ``4.12.0-beta.2`` or ``1.2``. Ordering follows NuGet /
SemVer rules:

- numeric segments compare numerically, missing segments count as 0
- a release sorts above any prerelease of the same core
- prerelease tags compare as dot-separated token sequences; numeric tokens
  sort below alphanumeric ones, alphanumeric tokens compare case-insensitively,
  and a strict prefix sorts first
"""

import functools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple

from tooldepot.core.exceptions import VersionParseError

logger = logging.getLogger(__name__)

MAX_SEGMENTS = 4


class Ordering(Enum):
    """Result of comparing two versions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class ParsedVersion:
    """
    Parsed version string.

    Attributes:
        major: Major version
        minor: Minor version (0 when absent)
        patch: Patch version (0 when absent)
        revision: Fourth segment (0 when absent)
        prerelease: Text after the first '-', or None for releases
        raw: The original string
    """

    major: int
    minor: int = 0
    patch: int = 0
    revision: int = 0
    prerelease: Optional[str] = None
    raw: str = field(default="")

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    @property
    def core(self) -> Tuple[int, int, int, int]:
        return (self.major, self.minor, self.patch, self.revision)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ParsedVersion):
            return NotImplemented
        return compare_versions(self, other) is Ordering.EQUAL

    def __lt__(self, other) -> bool:
        if not isinstance(other, ParsedVersion):
            return NotImplemented
        return compare_versions(self, other) is Ordering.LESS

    def __hash__(self) -> int:
        tokens = None
        if self.prerelease is not None:
            tokens = tuple(_token_key(t) for t in self.prerelease.split("."))
        return hash((self.core, tokens))

    def __str__(self) -> str:
        return self.raw


def parse_version(value: str) -> ParsedVersion:
    """
    Parse a version string.

    Args:
        value: Version string (e.g. '1.2', '4.12.0-beta.2')

    Returns:
        ParsedVersion

    Raises:
        VersionParseError: If the numeric core is malformed

    Example:
        >>> parse_version("2.0.0-alpha.1").prerelease
        'alpha.1'
    """
    core, sep, prerelease = value.partition("-")

    segments = core.split(".")
    if len(segments) > MAX_SEGMENTS:
        raise VersionParseError(
            f"Invalid version '{value}': more than {MAX_SEGMENTS} numeric segments",
            version=value,
        )

    numbers = []
    for segment in segments:
        # isdigit() also accepts non-ASCII digits; keep to plain 0-9
        if not segment or not (segment.isascii() and segment.isdigit()):
            raise VersionParseError(
                f"Invalid version '{value}': segment '{segment}' is not a "
                "non-negative integer",
                version=value,
            )
        numbers.append(int(segment))

    numbers.extend([0] * (MAX_SEGMENTS - len(numbers)))
    major, minor, patch, revision = numbers

    return ParsedVersion(
        major=major,
        minor=minor,
        patch=patch,
        revision=revision,
        prerelease=prerelease if sep else None,
        raw=value,
    )


def _sign(a, b) -> Ordering:
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


def _is_numeric(token: str) -> bool:
    return token.isascii() and token.isdigit()


def _token_key(token: str):
    return int(token) if _is_numeric(token) else token.lower()


def _compare_token(a: str, b: str) -> Ordering:
    a_numeric = _is_numeric(a)
    b_numeric = _is_numeric(b)

    if a_numeric and b_numeric:
        return _sign(int(a), int(b))
    if a_numeric:
        return Ordering.LESS
    if b_numeric:
        return Ordering.GREATER
    return _sign(a.lower(), b.lower())


def _compare_prerelease(a: Optional[str], b: Optional[str]) -> Ordering:
    if a is None and b is None:
        return Ordering.EQUAL
    if a is None:
        return Ordering.GREATER
    if b is None:
        return Ordering.LESS

    a_tokens = a.split(".")
    b_tokens = b.split(".")
    for a_token, b_token in zip(a_tokens, b_tokens):
        result = _compare_token(a_token, b_token)
        if result is not Ordering.EQUAL:
            return result

    return _sign(len(a_tokens), len(b_tokens))


def compare_versions(a: ParsedVersion, b: ParsedVersion) -> Ordering:
    """
    Compare two parsed versions.

    Returns:
        Ordering.LESS, Ordering.EQUAL or Ordering.GREATER
    """
    result = _sign(a.core, b.core)
    if result is not Ordering.EQUAL:
        return result
    return _compare_prerelease(a.prerelease, b.prerelease)


def select_max_version(versions: Iterable[str]) -> str:
    """
    Select the highest version from a list of version strings.

    Unparsable entries are skipped. Among equal versions the last one listed
    wins.

    Args:
        versions: Version strings as listed by a registry

    Returns:
        The raw string of the highest version

    Raises:
        VersionParseError: If no entry parses

    Example:
        >>> select_max_version(["1.0.0", "2.0.0-alpha.1", "2.0.0-alpha.2"])
        '2.0.0-alpha.2'
    """
    best: Optional[ParsedVersion] = None
    candidates = list(versions)

    for raw in candidates:
        try:
            parsed = parse_version(raw)
        except VersionParseError as e:
            logger.debug(f"Skipping unparsable version: {e}")
            continue
        if best is None or parsed >= best:
            best = parsed

    if best is None:
        raise VersionParseError(
            f"No parseable versions found among {len(candidates)} candidate(s)"
        )
    return best.raw
