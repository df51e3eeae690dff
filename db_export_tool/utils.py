"""
Utility functions for the database export tool.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from .exceptions import OutputOpenError
from .models import ExportMode, PROGRAM_NAME


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration.

    Console output goes to stderr; stdout may be carrying the export itself.
    """
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def open_output(output_path: Optional[str]) -> TextIO:
    """Open the export destination, or return stdout when no path is given."""
    if not output_path:
        return sys.stdout
    try:
        return open(output_path, 'w', encoding='utf-8')
    except OSError as e:
        raise OutputOpenError(f"can not open file: {output_path}, err: {e}") from e


def close_output(sink: TextIO) -> None:
    """Close a sink from open_output; stdout is only flushed."""
    if sink is sys.stdout:
        sink.flush()
    else:
        sink.close()


def format_header(mode: ExportMode, program_name: str = PROGRAM_NAME,
                  now: Optional[datetime] = None) -> str:
    """Build the comment line that opens every export."""
    now = now or datetime.now()
    return f"/* export {mode.value} by {program_name} at: {now.strftime('%Y-%m-%d %H:%M:%S')} */\n\n"


def write_header(sink: TextIO, mode: ExportMode, program_name: str = PROGRAM_NAME,
                 now: Optional[datetime] = None) -> bool:
    """Write the header comment. A failed write is logged, not fatal."""
    try:
        sink.write(format_header(mode, program_name, now))
        return True
    except OSError as e:
        logging.warning(f"write header comment failed: {e}")
        return False
