"""Public entry point for detecting the application stack of a directory."""

from __future__ import annotations

import os
import stat

from flkr.profile import AppProfile, DetectOptions
from flkr.registry import Registry


def detect(options: DetectOptions | None = None) -> AppProfile | None:
    """Scan the directory named by ``options.path`` and return its profile.

    An empty path means the current directory. Returns None when no stack is
    detected. Raises OSError if the path cannot be accessed and
    NotADirectoryError if it is not a directory.
    """
    if options is None:
        options = DetectOptions()
    path = options.path or "."
    try:
        info = os.stat(path)
    except OSError as exc:
        raise OSError(
            exc.errno, f"cannot access path {path!r}: {exc.strerror}", path
        ) from exc
    if not stat.S_ISDIR(info.st_mode):
        raise NotADirectoryError(f"path {path!r} is not a directory")
    return Registry().detect_from_path(path)