"""Filesystem helpers, the detector interface and cross-cutting enrichment."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from flkr.parsers import StrPath, parse_env_file
from flkr.profile import AppProfile


def file_exists(root: StrPath, path: str) -> bool:
    """Return True if ``path`` (a file or directory) exists under ``root``."""
    return (Path(root) / path).exists()


def read_file(root: StrPath, path: str) -> bytes:
    """Return the contents of ``path`` under ``root``; raises OSError on failure."""
    return (Path(root) / path).read_bytes()


def read_file_string(root: StrPath, path: str) -> str:
    """Return the contents of ``path`` as text, or an empty string if unreadable."""
    try:
        data = read_file(root, path)
    except OSError:
        return ""
    return data.decode("utf-8", errors="replace")


class Detector(ABC):
    """Inspects a repository and describes the ecosystem it finds.

    ``name`` identifies the detector; detectors with a lower ``priority``
    run first.
    """

    name: ClassVar[str]
    priority: ClassVar[int]

    @abstractmethod
    def detect(self, root: StrPath) -> AppProfile | None:
        """Return a profile if the ecosystem is present under ``root``, else None."""


def parse_env_example(root: StrPath) -> list[str]:
    """Return the variable names declared in ``.env.example``."""
    return parse_env_file(root, ".env.example")


def parse_procfile(root: StrPath) -> str:
    """Return the command of the ``web`` process in the Procfile, or ''."""
    content = read_file_string(root, "Procfile")
    for line in content.split("\n"):
        line = line.strip()
        if line.startswith("web:"):
            return line.removeprefix("web:").strip()
    return ""


class CrosscuttingDetector(Detector):
    """Collects data from .env.example and Procfile to enrich another profile.

    It never identifies a stack by itself; it is applied after detection.
    """

    name = "crosscutting"
    priority = 100

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return an enrichment profile, or None if neither file contributes."""
        profile = AppProfile()
        matched = False

        env_keys = parse_env_example(root)
        if env_keys:
            profile.env_vars = env_keys
            matched = True

        command = parse_procfile(root)
        if command:
            profile.start_command = command
            matched = True

        return profile if matched else None