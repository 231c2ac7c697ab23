"""Application profiles produced by stack detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Language(StrEnum):
    """A detected programming language."""

    NODE = "node"
    PYTHON = "python"
    GO = "go"
    RUST = "rust"
    RUBY = "ruby"
    ELIXIR = "elixir"
    PHP = "php"
    JAVA = "java"


class PackageManager(StrEnum):
    """A detected package manager."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    PIP = "pip"
    POETRY = "poetry"
    PIPENV = "pipenv"
    UV = "uv"
    GOMOD = "gomod"
    CARGO = "cargo"
    BUNDLER = "bundler"
    MIX = "mix"
    COMPOSER = "composer"
    MAVEN = "maven"
    GRADLE = "gradle"


class Framework(StrEnum):
    """A detected web framework; ``NONE`` is the empty string."""

    NONE = ""
    NEXTJS = "nextjs"
    NUXT = "nuxt"
    REMIX = "remix"
    VITE = "vite"
    DJANGO = "django"
    FLASK = "flask"
    FASTAPI = "fastapi"
    GIN = "gin"
    ACTIX = "actix"
    RAILS = "rails"
    PHOENIX = "phoenix"
    LARAVEL = "laravel"
    SPRING = "spring"


class InvalidProfileError(ValueError):
    """Raised when a profile lacks required fields or holds bad values."""


def _merge_unique(first: list[str], second: list[str]) -> list[str]:
    merged = list(first)
    seen = set(first)
    for item in second:
        if item not in seen:
            merged.append(item)
            seen.add(item)
    return merged


@dataclass
class AppProfile:
    """The full detected profile of an application."""

    language: Language | None = None
    version: str = ""
    package_manager: PackageManager | None = None
    framework: Framework = Framework.NONE
    build_command: str = ""
    start_command: str = ""
    output_dir: str = ""
    port: int = 0
    system_deps: list[str] = field(default_factory=list)
    env_vars: list[str] = field(default_factory=list)
    app_version: str = ""
    has_lockfile: bool = False
    lockfile_type: str = ""
    has_vendor: bool = False
    vendor_hash: str = ""
    confidence: float = 0.0
    detected_by: str = ""

    def validate(self) -> None:
        """Raise InvalidProfileError if required fields are missing or invalid."""
        problems = []
        if not self.language:
            problems.append("language is required")
        if not self.package_manager:
            problems.append("packageManager is required")
        if not 0 <= self.confidence <= 1:
            problems.append("confidence must be between 0 and 1")
        if problems:
            raise InvalidProfileError("invalid profile: " + "; ".join(problems))

    def merge(self, other: AppProfile | None) -> None:
        """Overlay the set fields of ``other`` onto this profile.

        Lists are appended without duplicates and the higher confidence wins.
        """
        if other is None:
            return
        for name in (
            "language",
            "version",
            "package_manager",
            "framework",
            "build_command",
            "start_command",
            "output_dir",
            "port",
            "app_version",
        ):
            value = getattr(other, name)
            if value:
                setattr(self, name, value)
        if other.has_lockfile:
            self.has_lockfile = True
        if other.lockfile_type:
            self.lockfile_type = other.lockfile_type
        if other.confidence > self.confidence:
            self.confidence = other.confidence
        if other.detected_by:
            self.detected_by = other.detected_by
        self.system_deps = _merge_unique(self.system_deps, other.system_deps)
        self.env_vars = _merge_unique(self.env_vars, other.env_vars)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the profile, leaving out empty optional fields."""
        out: dict[str, Any] = {"language": str(self.language or "")}

        def optional(key: str, value: Any) -> None:
            if value:
                out[key] = list(value) if isinstance(value, list) else value

        optional("version", self.version)
        out["packageManager"] = str(self.package_manager or "")
        optional("framework", str(self.framework))
        optional("buildCommand", self.build_command)
        optional("startCommand", self.start_command)
        optional("outputDir", self.output_dir)
        optional("port", self.port)
        optional("systemDeps", self.system_deps)
        optional("envVars", self.env_vars)
        optional("appVersion", self.app_version)
        out["hasLockfile"] = self.has_lockfile
        optional("lockfileType", self.lockfile_type)
        optional("hasVendor", self.has_vendor)
        optional("vendorHash", self.vendor_hash)
        out["confidence"] = self.confidence
        optional("detectedBy", self.detected_by)
        return out


@dataclass
class DetectOptions:
    """Options for detection."""

    path: str = "."
    verbose: bool = False


@dataclass
class GenerateOptions:
    """Options for flake generation.

    An empty ``template_version`` means the main revision.
    """

    output_path: str = ""
    template_version: str = ""
    dry_run: bool = False