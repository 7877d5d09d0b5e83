"""Utility functions for the Duplicate Finder."""

from .time import utc_now_str, format_timestamp
from .path import ensure_dir, to_item_id
from .format import format_size, format_duration, format_percentage

__all__ = ['utc_now_str', 'format_timestamp', 'ensure_dir', 'to_item_id',
           'format_size', 'format_duration', 'format_percentage']
