"""SQLite database access for the Duplicate Finder."""

from .manager import DatabaseManager

__all__ = ['DatabaseManager']
