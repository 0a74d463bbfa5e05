"""Owner-only file creation and append for certificate and key output."""

import contextlib
import os
import tempfile
from pathlib import Path

from .errors import FileWriteError


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        if written == 0:
            raise OSError(f"short write: {len(view)} bytes left")
        view = view[written:]


def create_secure(path: Path | str, data: bytes) -> Path:
    """Write data to a new file readable and writable only by the owner.

    The bytes go to a 0600 temporary file beside the target, are fsynced, and
    the temporary file is then renamed over the target. A symlink at path is
    followed so the file it points to is replaced rather than the link.

    Args:
        path: Destination file path
        data: Complete file contents

    Returns:
        Resolved path that was written

    Raises:
        FileWriteError: If the directory is missing or not writable, or the write fails
    """
    target = Path(path).expanduser().resolve(strict=False)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    except OSError as e:
        raise FileWriteError(f"cannot create {target}: {e}") from e

    try:
        try:
            _write_all(fd, data)
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(tmp_name, target)
    except OSError as e:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise FileWriteError(f"failed to write {target}: {e}") from e

    return target


def append_secure(path: Path | str, data: bytes) -> Path:
    """Append data to an existing file without touching its permissions.

    Args:
        path: Existing file, normally written earlier by create_secure
        data: Bytes to append

    Returns:
        Resolved path that was written

    Raises:
        FileNotFoundError: If path does not exist; nothing is written
        FileWriteError: If the file cannot be opened for writing or the write fails
    """
    target = Path(path).expanduser().resolve(strict=False)
    try:
        fd = os.open(target, os.O_WRONLY | os.O_APPEND)
    except FileNotFoundError:
        raise FileNotFoundError(f"cannot append to missing file: {target}") from None
    except OSError as e:
        raise FileWriteError(f"cannot open {target} for append: {e}") from e

    try:
        _write_all(fd, data)
        os.fsync(fd)
    except OSError as e:
        raise FileWriteError(f"failed to append to {target}: {e}") from e
    finally:
        os.close(fd)

    return target
