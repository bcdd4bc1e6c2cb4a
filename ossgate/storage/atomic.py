import os
import tempfile
from contextlib import contextmanager


@contextmanager
def atomic_write(filepath: str, mode: str = "w"):
    """
    Write to a temp file in the target folder, then rename over the target.
    Readers never observe a partially written report.
    """
    folder = os.path.dirname(filepath)
    if folder:
        os.makedirs(folder, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=folder or None, text="b" not in mode)
    encoding = None if "b" in mode else "utf-8"

    try:
        with os.fdopen(fd, mode, encoding=encoding) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, filepath)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise
