"""
Atomic file writer - ensures no partial writes or corrupted files.
Implements temp-write → fsync → rename pattern for durability.
"""

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, Union


logger = logging.getLogger(__name__)


class AtomicWriteError(Exception):
    """Raised when atomic writer arguments are invalid."""
    pass


def write_text_atomic(content: str, output_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Write text content atomically to prevent partial files.

    Args:
        content: Text to write
        output_path: Final path for the file

    Returns:
        Status record {status, output_path, bytes_written, duration_seconds}
        and an error message when the write failed

    Raises:
        AtomicWriteError: If content is not a string
    """
    if not isinstance(content, str):
        raise AtomicWriteError(f"Content must be str, got {type(content)}")

    output_path = Path(output_path)
    start_time = time.time()
    temp_path = None

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file in the target directory so the rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            suffix='.tmp',
            prefix=f'{output_path.stem}_',
            dir=output_path.parent
        )
        temp_path = Path(temp_path_str)

        with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, output_path)

        return {
            'status': 'completed',
            'output_path': str(output_path),
            'bytes_written': len(content.encode('utf-8')),
            'duration_seconds': time.time() - start_time,
        }

    except OSError as e:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()

        logger.error(f"Atomic write to {output_path} failed: {e}")
        return {
            'status': 'failed',
            'error': str(e),
            'output_path': str(output_path),
            'bytes_written': 0,
            'duration_seconds': time.time() - start_time,
        }


def write_json_atomic(payload: Any, output_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Serialize payload to indented JSON and write it atomically.

    Dates and other non-JSON values are written via str().

    Returns:
        Status record as for write_text_atomic
    """
    try:
        # Serialize first so a bad payload never touches the disk
        content = json.dumps(payload, indent=2, default=str)
    except (TypeError, ValueError) as e:
        return {
            'status': 'failed',
            'error': f'JSON serialization failed: {e}',
            'output_path': str(output_path),
            'bytes_written': 0,
        }

    return write_text_atomic(content, output_path)
