"""Comma-separated transaction log with a header row and free-text marks."""

from __future__ import annotations

import math
import os
import sys
from datetime import datetime

HEADER = (
    "      Date & Time,  Trans,  Elap Time,  Data Trans,  "
    "Resp Time,  Trans Rate,  Throughput,  Concurrent,    OKAY,   Failed\n"
)
_ENTRY_LIMIT = 511


class LogError(OSError):
    """Raised when the log file cannot be created or written."""


def _div(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator)


def file_exists(path: str | os.PathLike[str]) -> bool:
    """Return True if ``path`` can be opened for reading."""
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def create_logfile(path: str | os.PathLike[str]) -> bool:
    """Create the log file with its header row; return True on success."""
    try:
        fd = os.open(path, os.O_CREAT | os.O_WRONLY, 0o644)
    except OSError:
        return False
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(HEADER)
    except OSError:
        return False
    return True


def format_log_entry(when: datetime, count: int, elapsed: float, nbytes: int,
                     ttime: float, code: int, failed: int) -> str:
    """Return one log row for the given run statistics."""
    entry = "%s,%7d,%11.2f,%12d,%11.2f,%12.2f,%12.2f,%12.2f,%8d,%8d\n" % (
        when.strftime("%Y-%m-%d %H:%M:%S"),
        count,
        elapsed,
        nbytes,
        _div(ttime, count),
        _div(count, elapsed),
        _div(nbytes, elapsed),
        _div(ttime, elapsed),
        code,
        failed,
    )
    return entry[:_ENTRY_LIMIT]


def _ensure_logfile(logfile: str | os.PathLike[str]) -> None:
    if not file_exists(logfile) and not create_logfile(logfile):
        raise LogError(f"unable to create log file: {os.fspath(logfile)}")


def _append(logfile: str | os.PathLike[str], entry: str) -> None:
    try:
        with open(logfile, "a", encoding="utf-8") as handle:
            handle.write(entry)
    except OSError as exc:
        raise LogError(f"Unable to write to log file: {os.fspath(logfile)}") from exc


def write_to_log(logfile: str | os.PathLike[str], count: int, elapsed: float,
                 nbytes: int, ttime: float, code: int, failed: int,
                 show_logfile: bool = False) -> None:
    """Append a row of run statistics, creating the log if needed."""
    now = datetime.now()
    if show_logfile:
        home = os.environ.get("HOME", "")
        print(f"LOG FILE: {os.fspath(logfile)}", file=sys.stderr)
        print("You can disable this log file notification by editing", file=sys.stderr)
        print(f"{home}/.siege/siege.conf and changing 'show-logfile' to false.",
              file=sys.stderr)
    _ensure_logfile(logfile)
    _append(logfile, format_log_entry(now, count, elapsed, nbytes, ttime, code, failed))


def mark_log_file(logfile: str | os.PathLike[str], message: str) -> None:
    """Append a marker line holding ``message``, creating the log if needed."""
    _ensure_logfile(logfile)
    _append(logfile, f"**** {message} ****\n"[:_ENTRY_LIMIT])