"""Command implementations for the Duplicate Finder CLI."""

from .scan import ScanCommand, build_orchestrator
from .results import cmd_show_results, cmd_delete_duplicates
from .maintenance import cmd_reset

__all__ = ['ScanCommand', 'build_orchestrator', 'cmd_show_results', 'cmd_delete_duplicates', 'cmd_reset']
