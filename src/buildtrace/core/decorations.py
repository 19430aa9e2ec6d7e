"""Small formatting helpers for log prefixes, suffixes and diagnostic headers."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
import re

MAX_FILE_NAME_LEN = 80

_LEADING_SEP = re.compile(r"^[/\\]")


def time_prefix(now: datetime) -> str:
    """24-hour clock tag, e.g. ``[09:05:01]``."""
    return f"[{now:%H:%M:%S}]"


def memory_usage(rss_bytes: int) -> str:
    """Resident set size suffix in (decimal) megabytes, e.g. `` MEM: 84.2MB``."""
    return f" MEM: {rss_bytes / 1_000_000:.1f}MB"


def format_duration(duration_ms: int) -> str:
    """
    Human readable elapsed time.

    Usage example
    -------------
        format_duration(1500)   # 'in 1.50 s'
        format_duration(500)    # 'in 500 ms'
        format_duration(0)      # 'in less than 1 ms'
    """
    if duration_ms > 1000:
        return f"in {duration_ms / 1000:.2f} s"
    if duration_ms > 0:
        return f"in {duration_ms} ms"
    return "in less than 1 ms"


def format_file_name(root_dir: str, file_name: str) -> str:
    """Make ``file_name`` relative to ``root_dir`` and keep at most its last 80 characters."""
    file_name = file_name.replace(root_dir, "", 1)
    file_name = _LEADING_SEP.sub("", file_name, count=1)
    if len(file_name) > MAX_FILE_NAME_LEN:
        file_name = "..." + file_name[-MAX_FILE_NAME_LEN:]
    return file_name


def format_header(
    type: str,
    file_name: str,
    root_dir: str,
    start_line: Optional[int] = None,
    end_line: Optional[int] = None,
) -> str:
    """
    Single-line diagnostics header.

    Usage example
    -------------
        format_header("ERROR", "/proj/a.ts", "/proj", 5, 9)   # 'ERROR: a.ts, lines: 5 - 9'
    """
    header = f"{type}: {format_file_name(root_dir, file_name)}"

    if start_line is not None and start_line > 0:
        if end_line is not None and end_line > start_line:
            header += f", lines: {start_line} - {end_line}"
        else:
            header += f", line: {start_line}"

    return header
