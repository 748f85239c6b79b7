"""
Terminal rendering of log entries.
"""

import sys
from typing import Optional, TextIO

from .models import LogBatch, LogEntry


def format_entry(entry: LogEntry) -> str:
    """
    Render one entry as a header line followed by the indented message.

    Args:
        entry: Entry to render.

    Returns:
        Formatted text block, ending with a newline.
    """
    return (
        f"[{entry.severity}] {entry.host} -- {entry.application_name} -- "
        f"{entry.process_id} == {entry.timestamp.isoformat()}:\n"
        f"    {entry.message}\n"
    )


def print_batch(batch: LogBatch, stream: Optional[TextIO] = None) -> None:
    """Write every entry of a batch to `stream` (stdout by default), in order."""
    stream = stream if stream is not None else sys.stdout
    for entry in batch:
        print(format_entry(entry), file=stream)
    stream.flush()
