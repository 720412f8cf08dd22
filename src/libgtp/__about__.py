"""Metadata for libgtp package."""

from __future__ import annotations

__title__ = "libgtp"
__package_name__ = "libgtp"
__version__ = "0.1.0"
__description__ = "Typed, pythonic controller for Go Text Protocol (GTP) engines"
__author__ = "libgtp contributors"
__license__ = "MIT"
__copyright__ = "Copyright 2026- libgtp contributors"
