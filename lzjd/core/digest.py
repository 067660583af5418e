"""
Digest records and their text formats.

Digest lines look like ``lzjd:<name>:<base64 payload>``; comparison lines
look like ``<name_a>|<name_b>|<similarity:03d>``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union

from .errors import DigestDecodeError, DigestParseError, SourceIOError
from .sketch import LZDict

logger = logging.getLogger(__name__)

DIGEST_PREFIX = "lzjd:"


@dataclass(frozen=True)
class DigestRecord:
    """A named sketch. The name has no effect on similarity."""

    name: str
    sketch: LZDict

    def to_line(self) -> str:
        return f"{DIGEST_PREFIX}{self.name}:{self.sketch.to_persisted()}"


@dataclass(frozen=True)
class ComparisonResult:
    """Similarity of two named sketches as an integer percentage."""

    name_a: str
    name_b: str
    similarity: int

    def to_line(self) -> str:
        return f"{self.name_a}|{self.name_b}|{self.similarity:03d}"


def parse_digest_line(line: str,
                      path: Optional[str] = None,
                      line_number: Optional[int] = None) -> Optional[DigestRecord]:
    """
    Parse one digest line.

    Surrounding whitespace is ignored and blank lines yield None. The name
    runs from after the ``lzjd:`` prefix up to the last colon, so names may
    themselves contain colons.

    Raises:
        DigestParseError: line does not have the digest shape
        DigestDecodeError: payload cannot be decoded
    """
    line = line.strip()
    if not line:
        return None

    colon_index = line.rfind(":")
    if not line.startswith(DIGEST_PREFIX) or colon_index <= len(DIGEST_PREFIX):
        raise DigestParseError("Could not parse line", path=path, line_number=line_number)

    name = line[len(DIGEST_PREFIX):colon_index]
    payload = line[colon_index + 1:]
    try:
        sketch = LZDict.from_persisted(payload)
    except DigestDecodeError as e:
        e.details.update({'path': path, 'line_number': line_number})
        raise
    return DigestRecord(name, sketch)


def parse_digests(lines: Iterable[str], path: Optional[str] = None) -> List[DigestRecord]:
    """Parse digest lines; the first malformed line aborts the whole read."""
    records: List[DigestRecord] = []
    for line_number, line in enumerate(lines, start=1):
        record = parse_digest_line(line, path=path, line_number=line_number)
        if record is not None:
            records.append(record)
    return records


def read_digests(path: Union[str, Path]) -> List[DigestRecord]:
    """Read every digest record from a digest file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            records = parse_digests(f, path=str(path))
    except OSError as e:
        raise SourceIOError(f"IO error: {e}", path=str(path)) from e
    except UnicodeDecodeError as e:
        raise DigestParseError(f"Could not parse digest file: {e}", path=str(path)) from e
    logger.debug(f"Read {len(records)} digests from {path}")
    return records


def write_digests(records: Iterable[DigestRecord], writer: TextIO) -> int:
    """Write digest lines; returns the number of lines written."""
    count = 0
    for record in records:
        writer.write(record.to_line() + "\n")
        count += 1
    return count


def write_comparisons(results: Iterable[ComparisonResult], writer: TextIO) -> int:
    """Write comparison lines; returns the number of lines written."""
    count = 0
    for result in results:
        writer.write(result.to_line() + "\n")
        count += 1
    return count
