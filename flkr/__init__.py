"""Detect application stacks in repositories and describe them for Nix flakes."""

__version__ = "0.1.0"

__all__ = ["__version__"]