"""Nix-compatible hashes for build inputs."""

from __future__ import annotations

import os
import subprocess
import tempfile
from pathlib import Path

from flkr.parsers import StrPath


class NixHashError(RuntimeError):
    """Raised when a hash cannot be computed."""


def _run(args: list[str], label: str, **kwargs) -> str:
    try:
        result = subprocess.run(
            args, capture_output=True, text=True, check=False, **kwargs
        )
    except OSError as exc:
        raise NixHashError(f"{label}: {exc}") from exc
    if result.returncode != 0:
        raise NixHashError(
            f"{label}: {result.stderr}: exit status {result.returncode}"
        )
    return result.stdout


def go_vendor_hash(project_dir: StrPath) -> str:
    """Return the SRI ``vendorHash`` of a Go module for buildGoModule.

    Dependencies are vendored into a temporary directory with ``go mod vendor``
    and hashed with ``nix hash path``. Raises NixHashError on failure.
    """
    with tempfile.TemporaryDirectory(prefix="flkr-vendor-") as tmp:
        tmp_dir = Path(tmp)
        vendor_dir = tmp_dir / "vendor"
        env = {
            **os.environ,
            "GOFLAGS": "-mod=mod",
            "GOPATH": str(tmp_dir / "gopath"),
            "GOMODCACHE": str(tmp_dir / "gomodcache"),
        }
        _run(
            ["go", "mod", "vendor", "-o", str(vendor_dir)],
            "go mod vendor",
            cwd=project_dir,
            env=env,
        )
        output = _run(["nix", "hash", "path", str(vendor_dir)], "nix hash path")

    digest = output.strip()
    if not digest:
        raise NixHashError("nix hash path returned empty output")
    return digest