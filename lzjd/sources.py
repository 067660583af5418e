"""Byte sources and input path collection."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union
import logging

from .core.errors import SourceIOError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileSource:
    """A file on disk; its name is the path as given."""

    path: Path

    @property
    def name(self) -> str:
        return str(self.path)

    def read_bytes(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise SourceIOError(f"IO error: {e}", path=str(self.path)) from e


@dataclass(frozen=True)
class BytesSource:
    """An in-memory byte string with a caller-chosen name."""

    name: str
    data: bytes

    def read_bytes(self) -> bytes:
        return self.data


Source = Union[FileSource, BytesSource]


def collect_files(inputs: Iterable[Union[str, Path]], deep: bool = False) -> List[Path]:
    """
    Turn CLI inputs into a list of paths.

    Without `deep` the inputs are returned as given. With `deep` every
    input is walked recursively and only regular files are kept; an input
    that is itself a file is kept as is.

    Raises:
        SourceIOError: a directory could not be walked
    """
    paths = [Path(p) for p in inputs]
    if not deep:
        return paths

    files: List[Path] = []
    for base in paths:
        if base.is_file():
            files.append(base)
            continue
        if not base.exists():
            raise SourceIOError(f"Walkdir error: {base} does not exist", path=str(base))

        def on_error(err: OSError) -> None:
            raise SourceIOError(f"Walkdir error: {err}", path=err.filename) from err

        for dirpath, dirnames, filenames in os.walk(base, onerror=on_error):
            dirnames.sort()
            for filename in sorted(filenames):
                candidate = Path(dirpath) / filename
                if candidate.is_file():
                    files.append(candidate)

    logger.info(f"Collected {len(files)} files from {len(paths)} inputs")
    return files


def file_sources(paths: Iterable[Union[str, Path]]) -> List[FileSource]:
    return [FileSource(Path(p)) for p in paths]
