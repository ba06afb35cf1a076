# src/querysnoop/adapters/line_source.py
"""Query file reading.

Three ways to consume the same file, all yielding the same ordered lines:

- ``read_all_queries``         eager, returns a list
- ``iter_queries``             lazy generator, one line at a time
- ``read_and_process_queries`` pushes each line into a callback

Lines lose their terminator (``\\n``, ``\\r\\n`` or ``\\r``); empty lines are
kept. Every failure surfaces as a ``QuerySourceError`` subclass, nothing is
swallowed here.
"""
from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from querysnoop.core.contracts import Query
from querysnoop.core.errors import InputMissing, InputUnreadable, InvalidArgument, IOFailure
from querysnoop.core.metrics import inc

log = logging.getLogger("querysnoop.adapters.line_source")

Source = Union[str, "os.PathLike[str]"]
QueryProcessor = Callable[[Query], None]


def check_source(source: Optional[Source]) -> Path:
    """Validate ``source`` before any read and return it as a Path."""
    if source is None:
        raise InvalidArgument("source must not be None")
    try:
        raw = os.fspath(source)
    except TypeError as e:
        raise InvalidArgument(f"source must be a path, got {type(source).__name__}") from e
    if not isinstance(raw, str):
        raise InvalidArgument(f"source must be a text path, got {type(raw).__name__}")
    if not raw:
        raise InvalidArgument("source must not be empty")

    path = Path(raw)
    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError) as e:
        raise InputMissing("query file not found", path) from e
    except OSError as e:
        raise InputUnreadable(f"cannot stat query file ({e.strerror})", path) from e

    if not stat.S_ISREG(st.st_mode):
        raise InputUnreadable("not a regular file", path)
    if not os.access(path, os.R_OK):
        raise InputUnreadable("permission denied", path)
    return path


def _strip_eol(line: str) -> str:
    # universal newlines already folded \r\n and \r into \n
    return line[:-1] if line.endswith("\n") else line


def _lines(path: Path, encoding: Optional[str]) -> Iterator[Query]:
    try:
        f = path.open("r", encoding=encoding)
    except FileNotFoundError as e:
        raise InputMissing("query file disappeared before open", path) from e
    except PermissionError as e:
        raise InputUnreadable("permission denied", path) from e
    except OSError as e:
        raise IOFailure(f"cannot open query file ({e.strerror})", path) from e

    n = 0
    log.debug("open %s", path.as_posix())
    with f:
        try:
            while True:
                try:
                    line = f.readline()
                except (OSError, UnicodeDecodeError) as e:
                    raise IOFailure(f"read failed after {n} line(s) ({e})", path) from e
                if not line:
                    break
                n += 1
                yield _strip_eol(line)
        finally:
            log.debug("close %s lines=%d", path.as_posix(), n)
            inc("source_lines_total", n, source=path.name)


def iter_queries(source: Source, *, encoding: Optional[str] = None) -> Iterator[Query]:
    """Lazily yield queries. The path is checked now, the file opened on first next()."""
    path = check_source(source)
    return _lines(path, encoding)


def read_all_queries(source: Source, *, encoding: Optional[str] = None) -> List[Query]:
    """Read every query into a list."""
    return list(iter_queries(source, encoding=encoding))


def read_and_process_queries(source: Source, processor: QueryProcessor, *, encoding: Optional[str] = None) -> int:
    """Feed each query to ``processor`` in file order; returns the number delivered.

    Queries already delivered stay delivered if a read error cuts the stream
    short.
    """
    if not callable(processor):
        raise InvalidArgument("processor must be callable")
    delivered = 0
    gen = iter_queries(source, encoding=encoding)
    try:
        for query in gen:
            processor(query)
            delivered += 1
    finally:
        gen.close()
    return delivered
