"""Runs every built-in detector and picks the best match."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from flkr.compiled import ElixirDetector, GoDetector, JavaDetector, RustDetector
from flkr.core import CrosscuttingDetector, Detector
from flkr.parsers import StrPath
from flkr.profile import AppProfile
from flkr.scripting import NodeDetector, PHPDetector, PythonDetector, RubyDetector


def _builtin_detectors() -> list[Detector]:
    return [
        NodeDetector(),
        PythonDetector(),
        GoDetector(),
        RustDetector(),
        RubyDetector(),
        ElixirDetector(),
        PHPDetector(),
        JavaDetector(),
    ]


class Registry:
    """Holds the detectors and orchestrates detection."""

    def __init__(self, detectors: Iterable[Detector] | None = None) -> None:
        self.detectors = list(detectors) if detectors is not None else _builtin_detectors()

    def detect_all(self, root: StrPath) -> list[AppProfile]:
        """Run every detector by priority; return matches, most confident first."""
        ordered = sorted(self.detectors, key=lambda detector: detector.priority)
        profiles = [
            profile
            for profile in (detector.detect(root) for detector in ordered)
            if profile is not None
        ]
        profiles.sort(key=lambda profile: profile.confidence, reverse=True)
        return profiles

    def detect_best(self, root: StrPath) -> AppProfile | None:
        """Return the most confident profile enriched with cross-cutting data."""
        profiles = self.detect_all(root)
        if not profiles:
            return None
        best = profiles[0]
        enrichment = CrosscuttingDetector().detect(root)
        if enrichment is not None:
            best.merge(enrichment)
        return best

    def detect_from_path(self, path: StrPath) -> AppProfile | None:
        """Run :meth:`detect_best` on a directory of the filesystem."""
        return self.detect_best(Path(path))