#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Filesystem-backed asset catalogue.
Walks a directory tree and serves image renditions through Pillow.
"""

import io
import logging
import os
from pathlib import Path
from typing import Iterable, List, Set, Tuple

from PIL import Image, UnidentifiedImageError

from ..config import IMAGE_EXT
from ..errors import DeleteError, FetchError
from ..models.item import Item
from ..utils.path import to_item_id
from .base import AssetCatalog

logger = logging.getLogger(__name__)
logging.getLogger("PIL.TiffImagePlugin").setLevel(logging.WARNING)
logging.getLogger("PIL.PngImagePlugin").setLevel(logging.WARNING)


def discover_paths(root: Path):
    """Yield regular image files under root, not following symlinks."""
    for dirpath, _, filenames in os.walk(root, followlinks=False):
        for name in filenames:
            full = Path(dirpath) / name
            if full.suffix.lower() not in IMAGE_EXT:
                continue
            if full.is_symlink() or not full.is_file():
                continue
            yield full


def _read_dimensions(path: Path) -> Tuple[int, int]:
    try:
        with Image.open(path) as im:
            return im.size
    except (OSError, UnidentifiedImageError):
        # Undecodable here (e.g. HEIC without a plugin); still catalogued
        return 0, 0


class FolderCatalog(AssetCatalog):
    """Catalogue of the image files below a root directory, newest first."""

    def __init__(self, root: Path):
        self.root = Path(root)
        if not self.root.is_dir():
            raise FileNotFoundError(f"Source directory not found: {self.root}")

    def _path_for(self, item_id: str) -> Path:
        path = (self.root / item_id).resolve()
        root = self.root.resolve()
        if root not in path.parents:
            raise FetchError(item_id, "outside of catalogue root")
        return path

    def enumerate(self) -> List[Item]:
        items = []
        for path in discover_paths(self.root):
            try:
                st = path.stat()
            except OSError as e:
                logger.debug("Skipping %s: %s", path, e)
                continue
            width, height = _read_dimensions(path)
            items.append(Item(
                item_id=to_item_id(self.root, path),
                modified_at=st.st_mtime,
                size_bytes=st.st_size,
                width=width,
                height=height,
                media_format=path.suffix.lower().lstrip("."),
            ))
        items.sort(key=lambda i: (-(i.modified_at or 0.0), i.item_id))
        logger.info("Catalogued %d images under %s", len(items), self.root)
        return items

    def fetch_downscaled(self, item_id: str, target_size: Tuple[int, int]) -> bytes:
        path = self._path_for(item_id)
        try:
            with Image.open(path) as im:
                im.draft("RGB", target_size)
                im.thumbnail(target_size)
                rendition = im.convert("RGB")
            buf = io.BytesIO()
            rendition.save(buf, format="PNG")
            return buf.getvalue()
        except (OSError, UnidentifiedImageError, ValueError) as e:
            raise FetchError(item_id, str(e)) from e

    def fetch_original(self, item_id: str) -> bytes:
        path = self._path_for(item_id)
        try:
            return path.read_bytes()
        except OSError as e:
            raise FetchError(item_id, str(e)) from e

    def resolve_exists(self, item_ids: Iterable[str]) -> Set[str]:
        existing = set()
        for item_id in item_ids:
            try:
                if self._path_for(item_id).is_file():
                    existing.add(item_id)
            except FetchError:
                continue
        return existing

    def delete(self, item_ids: Iterable[str]) -> None:
        ids = list(item_ids)
        missing = [i for i in ids if i not in self.resolve_exists([i])]
        if missing:
            raise DeleteError(f"{len(missing)} items no longer exist", missing)
        for index, item_id in enumerate(ids):
            try:
                self._path_for(item_id).unlink()
            except OSError as e:
                raise DeleteError(f"Failed to delete {item_id}: {e}", ids[index:]) from e
        logger.info("Deleted %d items", len(ids))
