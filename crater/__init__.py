"""Toolchain specs, sizes, quoting, hex, paths and HTTP helpers for experiment coordination."""

__version__ = "0.1.0"