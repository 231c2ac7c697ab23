"""Command-line interface: detect application stacks and report them."""

from __future__ import annotations

import argparse
import json
import sys

from flkr.profile import AppProfile
from flkr.registry import Registry

VERSION = "dev"

_DESCRIPTION = (
    "flkr scans repositories, detects the application stack, and generates "
    "a minimal flake.nix referencing the flkr-templates registry."
)


def format_profile(profile: AppProfile) -> str:
    """Return the human-readable report of a detected profile."""
    lines = [f"Language:        {profile.language or ''}"]
    if profile.version:
        lines.append(f"Version:         {profile.version}")
    lines.append(f"Package Manager: {profile.package_manager or ''}")
    if profile.framework:
        lines.append(f"Framework:       {profile.framework}")
    if profile.build_command:
        lines.append(f"Build Command:   {profile.build_command}")
    if profile.start_command:
        lines.append(f"Start Command:   {profile.start_command}")
    if profile.output_dir:
        lines.append(f"Output Dir:      {profile.output_dir}")
    if profile.port:
        lines.append(f"Port:            {profile.port}")
    if profile.env_vars:
        lines.append(f"Env Vars:        [{' '.join(profile.env_vars)}]")
    lines.append(f"Confidence:      {profile.confidence * 100:.0f}%")
    return "\n".join(lines) + "\n"


def _global_flags(parser: argparse.ArgumentParser, default) -> None:
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=default,
        help="enable verbose output",
    )
    parser.add_argument(
        "--json", dest="json_output", action="store_true", default=default,
        help="output in JSON format",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flkr",
        description="Detect application stacks and generate Nix flakes. " + _DESCRIPTION,
    )
    _global_flags(parser, False)

    shared = argparse.ArgumentParser(add_help=False)
    _global_flags(shared, argparse.SUPPRESS)

    commands = parser.add_subparsers(dest="command")
    detect_parser = commands.add_parser(
        "detect",
        parents=[shared],
        help="Detect the application stack in a repository",
    )
    detect_parser.add_argument("path", nargs="?", default=".")
    commands.add_parser("version", parents=[shared], help="Print the version of flkr")
    return parser


def _run_detect(path: str, json_output: bool) -> int:
    try:
        profile = Registry().detect_from_path(path)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if profile is None:
        print("no application stack detected", file=sys.stderr)
        return 1
    if json_output:
        sys.stdout.write(json.dumps(profile.to_dict(), indent=2, ensure_ascii=False) + "\n")
    else:
        sys.stdout.write(format_profile(profile))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the flkr command line and return the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command == "detect":
        return _run_detect(args.path, args.json_output)
    if args.command == "version":
        print(f"flkr {VERSION}")
        return 0
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())