"""
JSON document storage on the local filesystem.

Reads fail open (missing or corrupt file -> None); writes go through a
temporary file that is renamed over the target so a reader never sees a
half-written document.
"""

import json
import os
from typing import Any, Optional

from activity_bookings.core.logging import get_logger

logger = get_logger(__name__)


def ensure_directory_exists(dir_path: str) -> None:
    if dir_path and not os.path.isdir(dir_path):
        os.makedirs(dir_path, exist_ok=True)
        logger.info("directory_created", path=dir_path)


def read_json_file(file_path: str) -> Optional[Any]:
    """Parse a JSON document. Returns None if the file is missing or invalid."""
    if not os.path.exists(file_path):
        return None

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error("json_read_failed", path=file_path, error=str(e))
        return None


def write_json_file(file_path: str, data: Any) -> None:
    """
    Write ``data`` as pretty-printed JSON using write-to-temp then rename.
    Raises OSError/TypeError on failure; callers decide whether to absorb it.
    """
    ensure_directory_exists(os.path.dirname(file_path))

    temp_path = f"{file_path}.tmp"
    content = json.dumps(data, indent=2, ensure_ascii=False)

    with open(temp_path, "w", encoding="utf-8") as f:
        f.write(content)
    os.replace(temp_path, file_path)

    logger.debug("json_written", path=file_path)
