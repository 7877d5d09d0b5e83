"""Asset catalogues the scanner can read from."""

from .base import AssetCatalog
from .folder import FolderCatalog, discover_paths

__all__ = ['AssetCatalog', 'FolderCatalog', 'discover_paths']
