"""Parsers for the manifest files that detection inspects.

Every parser takes a root directory and a path relative to it. Parsers raise
OSError when the file cannot be read and ValueError when it is malformed.
"""

from __future__ import annotations

import json
import os
import tomllib
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

StrPath = str | os.PathLike[str]


def _read(root: StrPath, path: str) -> bytes:
    return (Path(root) / path).read_bytes()


def _string(value: Any, name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{name}: expected a string, got {type(value).__name__}")
    return value


def _table(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{name}: expected an object, got {type(value).__name__}")
    return value


def _string_map(value: Any, name: str) -> dict[str, str]:
    table = _table(value, name)
    return {key: _string(item, f"{name}.{key}") for key, item in table.items()}


def _string_list(value: Any, name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{name}: expected a list, got {type(value).__name__}")
    return [_string(item, name) for item in value]


def parse_env_file(root: StrPath, path: str) -> list[str]:
    """Return the variable names in a .env-style file, or [] if it is unreadable."""
    try:
        text = _read(root, path).decode("utf-8", errors="replace")
    except OSError:
        return []
    keys = []
    for line in text.split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, _ = line.partition("=")
        key = key.strip()
        if sep and key:
            keys.append(key)
    return keys


def _load_json_object(root: StrPath, path: str) -> dict[str, Any]:
    data = json.loads(_read(root, path))
    return _table(data, path)


@dataclass
class PackageJSON:
    """The fields of a package.json that detection uses."""

    name: str = ""
    version: str = ""
    scripts: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    node_engine: str = ""

    def has_dep(self, name: str) -> bool:
        """Return True if ``name`` is a production or development dependency."""
        return name in self.dependencies or name in self.dev_dependencies


def parse_package_json(root: StrPath, path: str) -> PackageJSON:
    """Read and parse a package.json."""
    data = _load_json_object(root, path)
    engines = _table(data.get("engines"), "engines")
    return PackageJSON(
        name=_string(data.get("name"), "name"),
        version=_string(data.get("version"), "version"),
        scripts=_string_map(data.get("scripts"), "scripts"),
        dependencies=_string_map(data.get("dependencies"), "dependencies"),
        dev_dependencies=_string_map(data.get("devDependencies"), "devDependencies"),
        node_engine=_string(engines.get("node"), "engines.node"),
    )


@dataclass
class ComposerJSON:
    """The fields of a composer.json that detection uses."""

    name: str = ""
    version: str = ""
    require: dict[str, str] = field(default_factory=dict)
    scripts: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    def has_require(self, name: str) -> bool:
        """Return True if the composer package ``name`` is required."""
        return name in self.require


def parse_composer_json(root: StrPath, path: str) -> ComposerJSON:
    """Read and parse a composer.json."""
    data = _load_json_object(root, path)
    return ComposerJSON(
        name=_string(data.get("name"), "name"),
        version=_string(data.get("version"), "version"),
        require=_string_map(data.get("require"), "require"),
        scripts=_table(data.get("scripts"), "scripts"),
        extra=_table(data.get("extra"), "extra"),
    )


@dataclass(frozen=True)
class LockfileInfo:
    """A lockfile found in a project root."""

    type: str
    path: str


_LOCKFILES = {
    "package-lock.json": "npm",
    "yarn.lock": "yarn",
    "pnpm-lock.yaml": "pnpm",
    "Pipfile.lock": "pipenv",
    "poetry.lock": "poetry",
    "uv.lock": "uv",
    "go.sum": "gomod",
    "Cargo.lock": "cargo",
    "Gemfile.lock": "bundler",
    "mix.lock": "mix",
    "composer.lock": "composer",
}


def detect_lockfile(root: StrPath) -> LockfileInfo | None:
    """Return the first known lockfile present in ``root``, or None."""
    base = Path(root)
    for path, kind in _LOCKFILES.items():
        if (base / path).exists():
            return LockfileInfo(type=kind, path=path)
    return None


def _load_toml(root: StrPath, path: str) -> dict[str, Any]:
    return tomllib.loads(_read(root, path).decode("utf-8"))


_DEP_NAME_TERMINATORS = "><=![;"


@dataclass
class PyprojectTOML:
    """The fields of a pyproject.toml that detection uses."""

    name: str = ""
    version: str = ""
    requires_python: str = ""
    dependencies: list[str] = field(default_factory=list)
    poetry_name: str = ""
    poetry_dependencies: dict[str, Any] = field(default_factory=dict)
    poetry_scripts: dict[str, str] = field(default_factory=dict)

    def has_dep(self, name: str) -> bool:
        """Return True if ``name`` is a project or Poetry dependency."""
        for spec in self.dependencies:
            if not spec.startswith(name):
                continue
            rest = spec[len(name):]
            if not rest or rest[0] in _DEP_NAME_TERMINATORS:
                return True
        return name in self.poetry_dependencies


def parse_pyproject_toml(root: StrPath, path: str) -> PyprojectTOML:
    """Read and parse a pyproject.toml."""
    data = _load_toml(root, path)
    project = _table(data.get("project"), "project")
    tool = _table(data.get("tool"), "tool")
    poetry = _table(tool.get("poetry"), "tool.poetry")
    return PyprojectTOML(
        name=_string(project.get("name"), "project.name"),
        version=_string(project.get("version"), "project.version"),
        requires_python=_string(
            project.get("requires-python"), "project.requires-python"
        ),
        dependencies=_string_list(
            project.get("dependencies"), "project.dependencies"
        ),
        poetry_name=_string(poetry.get("name"), "tool.poetry.name"),
        poetry_dependencies=_table(
            poetry.get("dependencies"), "tool.poetry.dependencies"
        ),
        poetry_scripts=_string_map(poetry.get("scripts"), "tool.poetry.scripts"),
    )


@dataclass
class CargoTOML:
    """The fields of a Cargo.toml that detection uses."""

    name: str = ""
    version: str = ""
    edition: str = ""
    dependencies: dict[str, Any] = field(default_factory=dict)

    def has_dep(self, name: str) -> bool:
        """Return True if ``name`` is a cargo dependency."""
        return name in self.dependencies


def parse_cargo_toml(root: StrPath, path: str) -> CargoTOML:
    """Read and parse a Cargo.toml."""
    data = _load_toml(root, path)
    package = _table(data.get("package"), "package")
    return CargoTOML(
        name=_string(package.get("name"), "package.name"),
        version=_string(package.get("version"), "package.version"),
        edition=_string(package.get("edition"), "package.edition"),
        dependencies=_table(data.get("dependencies"), "dependencies"),
    )


@dataclass
class RustToolchainTOML:
    """The toolchain channel from a rust-toolchain.toml."""

    channel: str = ""


def parse_rust_toolchain_toml(root: StrPath, path: str) -> RustToolchainTOML:
    """Read and parse a rust-toolchain.toml."""
    data = _load_toml(root, path)
    toolchain = _table(data.get("toolchain"), "toolchain")
    return RustToolchainTOML(
        channel=_string(toolchain.get("channel"), "toolchain.channel")
    )


_SPRING_BOOT_GROUP = "org.springframework.boot"


@dataclass
class PomXML:
    """The fields of a Maven pom.xml that detection uses.

    ``dependencies`` holds (groupId, artifactId) pairs.
    """

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    properties: dict[str, str] = field(default_factory=dict)
    dependencies: list[tuple[str, str]] = field(default_factory=list)
    parent_group_id: str = ""
    parent_artifact_id: str = ""

    def has_dep(self, group_id: str, artifact_id: str) -> bool:
        """Return True if the dependency groupId:artifactId is declared."""
        return (group_id, artifact_id) in self.dependencies

    def is_spring_boot(self) -> bool:
        """Return True if the parent or any dependency is from Spring Boot."""
        if self.parent_group_id == _SPRING_BOOT_GROUP:
            return True
        return any(group == _SPRING_BOOT_GROUP for group, _ in self.dependencies)

    def java_version(self) -> str:
        """Return the configured Java version, or an empty string."""
        return self.properties.get("java.version") or self.properties.get(
            "maven.compiler.source", ""
        )


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def _children(element: ET.Element, name: str):
    return (child for child in element if _local_name(child.tag) == name)


def _text(element: ET.Element) -> str:
    return "".join(element.itertext())


def _child_text(element: ET.Element, name: str) -> str:
    return next((_text(child) for child in _children(element, name)), "")


def parse_pom_xml(root: StrPath, path: str) -> PomXML:
    """Read and parse a pom.xml."""
    data = _read(root, path)
    try:
        project = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"{path}: {exc}") from exc
    if _local_name(project.tag) != "project":
        raise ValueError(
            f"{path}: expected element <project> but have <{_local_name(project.tag)}>"
        )

    pom = PomXML(
        group_id=_child_text(project, "groupId"),
        artifact_id=_child_text(project, "artifactId"),
        version=_child_text(project, "version"),
    )
    for properties in _children(project, "properties"):
        for prop in properties:
            pom.properties[_local_name(prop.tag)] = _text(prop)
    for block in _children(project, "dependencies"):
        for dependency in _children(block, "dependency"):
            pom.dependencies.append(
                (
                    _child_text(dependency, "groupId"),
                    _child_text(dependency, "artifactId"),
                )
            )
    parent = next(_children(project, "parent"), None)
    if parent is not None:
        pom.parent_group_id = _child_text(parent, "groupId")
        pom.parent_artifact_id = _child_text(parent, "artifactId")
    return pom