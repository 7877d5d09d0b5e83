#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Path utility functions for the Duplicate Finder.
"""

from pathlib import Path


def ensure_dir(p: Path) -> None:
    """Ensure directory exists, creating it if necessary."""
    Path(p).mkdir(parents=True, exist_ok=True)


def to_item_id(root: Path, path: Path) -> str:
    """Stable catalogue id for a file: its POSIX path relative to the root."""
    return Path(path).relative_to(root).as_posix()
