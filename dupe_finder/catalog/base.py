"""
Interface of the asset catalogue consumed by the scanner.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Set, Tuple

from ..models.item import Item


class AssetCatalog(ABC):
    """Enumerates items and serves their pixel data."""

    @abstractmethod
    def enumerate(self) -> List[Item]:
        """Every item in catalogue order (without content hash or features)."""

    @abstractmethod
    def fetch_downscaled(self, item_id: str, target_size: Tuple[int, int]) -> bytes:
        """Encoded image no larger than target_size. Raises FetchError."""

    @abstractmethod
    def fetch_original(self, item_id: str) -> bytes:
        """Original encoded bytes. Raises FetchError."""

    @abstractmethod
    def resolve_exists(self, item_ids: Iterable[str]) -> Set[str]:
        """Subset of item_ids still present in the catalogue."""

    @abstractmethod
    def delete(self, item_ids: Iterable[str]) -> None:
        """Remove items. Raises DeleteError naming the ids that were not removed."""
