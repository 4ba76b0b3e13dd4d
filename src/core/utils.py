import json
import os
import re
import tempfile
from typing import Any, Optional

# Characters commonly used as word separators in file names.
_SEPARATORS_RE = re.compile(r"[-_.~+]+")


def collapse(s: str) -> str:
    """
    Collapse runs of whitespace into a single space and trim both ends.
    """
    return re.sub(r'\s+', ' ', s).strip()


def is_blank(s: Optional[str]) -> bool:
    return s is None or not s.strip()


def norm(s: Optional[str]) -> Optional[str]:
    """Normalize optional strings (strip + convert empty to None)."""
    if not s:
        return None
    s = s.strip()
    return s or None


def path_key(file_path: str) -> str:
    """Case-insensitive identity of a file path."""
    return file_path.lower()


def query_from_path(file_path: str) -> str:
    """
    Derive a free-text search query from an audio file path:
    base name without extension, separators turned into spaces, collapsed.

    Both "/" and "\\" are treated as directory separators so Windows paths
    stored in the library resolve the same on every platform.
    """
    base = re.split(r"[\\/]", file_path or "")[-1]
    stem, _ext = os.path.splitext(base)
    return collapse(_SEPARATORS_RE.sub(" ", stem))


def atomic_write_json(path: str, data: Any) -> None:
    """
    Serialize `data` to `path` without ever leaving a half-written file:
    write to a temp file in the same directory, fsync, then os.replace().
    """
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        prefix=os.path.basename(path) + ".", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise


def read_json_list(path: str) -> Optional[list]:
    """
    Read a JSON list from `path`.

    Returns None when the file is missing, empty, or holds JSON `null`.
    Raises ValueError when the content is not a JSON list.
    """
    if not os.path.exists(path):
        return None

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    if not text.strip():
        return None

    data = json.loads(text)
    if data is None:
        return None
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON list, got {type(data).__name__}")
    return data
