"""Detectors for Go, Rust, Java and Elixir applications."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from flkr.core import Detector, file_exists, read_file_string
from flkr.parsers import (
    StrPath,
    parse_cargo_toml,
    parse_pom_xml,
    parse_rust_toolchain_toml,
)
from flkr.profile import AppProfile, Framework, Language, PackageManager


@dataclass(frozen=True)
class MainPackageInfo:
    """Where a Go program's ``package main`` lives and what to call the binary."""

    bin_name: str
    pkg_path: str


def _sorted_entries(root: StrPath, directory: str) -> list[Path] | None:
    base = Path(root) if directory == "." else Path(root) / directory
    try:
        return sorted(base.iterdir(), key=lambda entry: entry.name)
    except OSError:
        return None


def dir_has_main_package(root: StrPath, directory: str) -> bool:
    """Return True if a non-test Go file in ``directory`` declares ``package main``."""
    entries = _sorted_entries(root, directory)
    if entries is None:
        return False
    for entry in entries:
        name = entry.name
        if entry.is_dir() or not name.endswith(".go") or name.endswith("_test.go"):
            continue
        rel = name if directory == "." else f"{directory}/{name}"
        for line in read_file_string(root, rel).split("\n"):
            line = line.strip()
            if not line or line.startswith("//"):
                continue
            if line == "package main":
                return True
            break
    return False


def find_main_package(root: StrPath, module_bin_name: str) -> MainPackageInfo:
    """Locate the main package: the root first, then the ``cmd/`` subdirectories."""
    if dir_has_main_package(root, "."):
        return MainPackageInfo(module_bin_name, ".")

    cmd_entries = _sorted_entries(root, "cmd")
    if cmd_entries is not None:
        subdirs = [entry.name for entry in cmd_entries if entry.is_dir()]
        if module_bin_name in subdirs and dir_has_main_package(
            root, f"cmd/{module_bin_name}"
        ):
            return MainPackageInfo(module_bin_name, f"./cmd/{module_bin_name}")
        for name in subdirs:
            if dir_has_main_package(root, f"cmd/{name}"):
                return MainPackageInfo(name, f"./cmd/{name}")

    return MainPackageInfo(module_bin_name, ".")


class GoDetector(Detector):
    """Detects Go applications from go.mod."""

    name = "go"
    priority = 30

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return a Go profile if go.mod is present."""
        if not file_exists(root, "go.mod"):
            return None

        profile = AppProfile(
            language=Language.GO,
            package_manager=PackageManager.GOMOD,
            confidence=0.8,
            detected_by=self.name,
            build_command="go build -o app .",
            start_command="./app",
            port=8080,
        )

        if file_exists(root, "go.sum"):
            profile.has_lockfile = True
            profile.lockfile_type = "gomod"
        if file_exists(root, "vendor"):
            profile.has_vendor = True

        content = read_file_string(root, "go.mod")
        module_name = ""
        for line in content.split("\n"):
            line = line.strip()
            if line.startswith("module "):
                module_name = line.removeprefix("module ")
            if line.startswith("go "):
                profile.version = line.removeprefix("go ")

        bin_name = module_name.split("/")[-1] if module_name else "app"
        main_pkg = find_main_package(root, bin_name)
        profile.build_command = f"go build -o {main_pkg.bin_name} {main_pkg.pkg_path}"
        profile.start_command = f"./{main_pkg.bin_name}"

        if "github.com/gin-gonic/gin" in content:
            profile.framework = Framework.GIN
            profile.confidence = 0.9

        return profile


class RustDetector(Detector):
    """Detects Rust applications from Cargo.toml."""

    name = "rust"
    priority = 40

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return a Rust profile if Cargo.toml is present."""
        if not file_exists(root, "Cargo.toml"):
            return None

        profile = AppProfile(
            language=Language.RUST,
            package_manager=PackageManager.CARGO,
            confidence=0.8,
            detected_by=self.name,
            build_command="cargo build --release",
            start_command="./target/release/app",
            port=8080,
        )

        if file_exists(root, "Cargo.lock"):
            profile.has_lockfile = True
            profile.lockfile_type = "cargo"

        try:
            cargo = parse_cargo_toml(root, "Cargo.toml")
        except (OSError, ValueError):
            cargo = None
        if cargo is not None:
            if cargo.version:
                profile.app_version = cargo.version
            if cargo.edition:
                profile.version = cargo.edition
            if cargo.name:
                profile.start_command = f"./target/release/{cargo.name}"
            if cargo.has_dep("actix-web"):
                profile.framework = Framework.ACTIX
                profile.confidence = 0.9

        try:
            toolchain = parse_rust_toolchain_toml(root, "rust-toolchain.toml")
        except (OSError, ValueError):
            toolchain = None
        if toolchain is not None and toolchain.channel:
            profile.version = toolchain.channel

        return profile


class JavaDetector(Detector):
    """Detects Java applications built with Maven or Gradle."""

    name = "java"
    priority = 80

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return a Java profile if pom.xml or a Gradle build file is present."""
        has_pom = file_exists(root, "pom.xml")
        has_gradle = file_exists(root, "build.gradle") or file_exists(
            root, "build.gradle.kts"
        )
        if not has_pom and not has_gradle:
            return None

        profile = AppProfile(
            language=Language.JAVA,
            confidence=0.7,
            detected_by=self.name,
            port=8080,
        )

        if has_gradle:
            profile.package_manager = PackageManager.GRADLE
            profile.build_command = "./gradlew build"
            profile.start_command = "java -jar build/libs/*.jar"

        if has_pom:
            profile.package_manager = PackageManager.MAVEN
            profile.build_command = "mvn package -DskipTests"
            profile.start_command = "java -jar target/*.jar"
            try:
                pom = parse_pom_xml(root, "pom.xml")
            except (OSError, ValueError):
                pom = None
            if pom is not None:
                if pom.version:
                    profile.app_version = pom.version
                java_version = pom.java_version()
                if java_version:
                    profile.version = java_version
                if pom.is_spring_boot():
                    profile.framework = Framework.SPRING
                    profile.confidence = 0.9

        return profile


_MIX_VERSION_RE = re.compile(r'version:[\t\n\f\r ]*"([^"]+)"')


def extract_mix_version(content: str) -> str:
    """Return the first ``version: "..."`` value in a mix.exs, or ''."""
    match = _MIX_VERSION_RE.search(content)
    return match.group(1) if match else ""


class ElixirDetector(Detector):
    """Detects Elixir applications from mix.exs."""

    name = "elixir"
    priority = 60

    def detect(self, root: StrPath) -> AppProfile | None:
        """Return an Elixir profile if mix.exs is present."""
        if not file_exists(root, "mix.exs"):
            return None

        profile = AppProfile(
            language=Language.ELIXIR,
            package_manager=PackageManager.MIX,
            confidence=0.8,
            detected_by=self.name,
            build_command="mix do deps.get, compile",
            start_command="mix phx.server",
            port=4000,
        )

        if file_exists(root, "mix.lock"):
            profile.has_lockfile = True
            profile.lockfile_type = "mix"

        version = read_file_string(root, ".elixir-version")
        if version:
            profile.version = version.strip()

        mix_exs = read_file_string(root, "mix.exs")
        app_version = extract_mix_version(mix_exs)
        if app_version:
            profile.app_version = app_version

        if ":phoenix" in mix_exs:
            profile.framework = Framework.PHOENIX
            profile.confidence = 0.9
            profile.system_deps = ["inotify-tools"]

        return profile