#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Time utility functions for the Duplicate Finder.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now_str() -> str:
    """Return current UTC time in ISO-8601 format with 'Z'."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_timestamp(ts: Optional[float]) -> str:
    """Render a POSIX timestamp the same way as utc_now_str()."""
    if ts is None:
        return "-"
    return datetime.fromtimestamp(ts, timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
