"""Reading and writing document files.

Files are handled as raw bytes. Saving writes every committed line
verbatim, terminators included, through a temporary file that is renamed
over the target once fully written.
"""

import errno
import logging
import os
import tempfile
from typing import Optional

from .constants import EditorConstants
from .document import Document
from .errors import EditorIOError

logger = logging.getLogger(__name__)


def read_document(path: str) -> Optional[bytes]:
    """Return the full contents of ``path``.

    Args:
        path: File to read.

    Returns:
        The file's bytes, or None if the file does not exist.

    Raises:
        EditorIOError: The file exists but could not be read.
    """
    try:
        with open(path, 'rb') as f:
            return f.read()
    except FileNotFoundError:
        logger.info("%s does not exist, starting with an empty document", path)
        return None
    except OSError as e:
        logger.error("Could not read %s: %s", path, e)
        raise EditorIOError(f"could not read file {path}: {e.strerror or e}", path) from e


def write_document(path: str, document: Document) -> int:
    """Save ``document`` to ``path`` atomically.

    Args:
        path: Target file; created if missing.
        document: Lines to write, each with its own terminator.

    Returns:
        Number of bytes written.

    Raises:
        EditorIOError: The file could not be written completely. The
            original file is left untouched.
    """
    content = document.to_bytes()
    # Temp file in the same directory so the rename stays on one filesystem
    dir_name = os.path.dirname(path) or '.'
    base_name = os.path.basename(path)
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name,
                                         prefix=EditorConstants.ATOMIC_SAVE_PREFIX + base_name,
                                         suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            written = temp_file.write(content)
            if written != len(content):
                raise EditorIOError(
                    f"short write to {path}: {written} of {len(content)} bytes", path)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_filename, path)
    except EditorIOError:
        _remove_quietly(temp_filename)
        raise
    except PermissionError as e:
        _remove_quietly(temp_filename)
        logger.error("Permission denied saving %s", path)
        raise EditorIOError(f"Permission denied saving {path}", path) from e
    except OSError as e:
        _remove_quietly(temp_filename)
        logger.error("Could not save %s: %s", path, e)
        if e.errno == errno.ENOSPC:
            raise EditorIOError("No space left on device", path) from e
        raise EditorIOError(f"Cannot save to {path}", path) from e
    logger.info("Saved %d lines (%d bytes) to %s", len(document), len(content), path)
    return len(content)


def _remove_quietly(filename: Optional[str]) -> None:
    if filename is None:
        return
    try:
        os.remove(filename)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary file %s: %s", filename, e)
