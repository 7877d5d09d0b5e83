#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Shared fixtures for the Duplicate Finder test suite.
"""

import io
import random
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest
from PIL import Image

from dupe_finder.catalog.base import AssetCatalog
from dupe_finder.config import ScanConfig
from dupe_finder.database.manager import DatabaseManager
from dupe_finder.errors import DeleteError, FetchError
from dupe_finder.models.feature import FeatureVector
from dupe_finder.models.item import Item
from dupe_finder.storage.backend import MemoryStateBackend
from dupe_finder.storage.records import ScanRecordStore
from dupe_finder.storage.result_cache import ResultCache


def noise_image(seed: int, size: int = 32) -> Image.Image:
    """Deterministic grey-noise RGB image; different seeds are visually unrelated."""
    rng = random.Random(seed)
    data = bytes(rng.randrange(256) for _ in range(size * size))
    return Image.frombytes("L", (size, size), data).convert("RGB")


def dimmed(img: Image.Image, factor: float = 0.95) -> Image.Image:
    """Same picture, slightly darker: a different fingerprint but a near-identical descriptor."""
    return img.point(lambda v: int(v * factor))


def vector(ones: int) -> FeatureVector:
    """256-bit descriptor with the leading `ones` bits set; distance(vector(a), vector(b)) == |a-b|/256."""
    value = (1 << 256) - (1 << (256 - ones)) if ones else 0
    return FeatureVector.from_hex(f"{value:064x}")


def make_item(item_id: str, modified_at: Optional[float] = 1000.0, size_bytes: int = 100,
              content_hash: Optional[str] = None, features: Optional[FeatureVector] = None,
              media_format: str = "jpg") -> Item:
    return Item(item_id=item_id, modified_at=modified_at, size_bytes=size_bytes,
                width=32, height=32, media_format=media_format,
                content_hash=content_hash, features=features)


class FakeCatalog(AssetCatalog):
    """In-memory catalogue serving generated images as PNG bytes."""

    def __init__(self):
        self.items: List[Item] = []
        self.images: Dict[str, Image.Image] = {}
        self.failing: Set[str] = set()
        self.corrupt: Set[str] = set()
        self.fetch_calls = 0
        self.requested_sizes: List[Tuple[int, int]] = []
        self.enumerate_error: Optional[BaseException] = None

    def add(self, item_id: str, image: Optional[Image.Image] = None,
            modified_at: Optional[float] = 1000.0, size_bytes: int = 100,
            media_format: str = "jpg") -> Item:
        if image is None:
            image = noise_image(len(self.items) + 1, size=16)
        item = Item(item_id=item_id, modified_at=modified_at, size_bytes=size_bytes,
                    width=image.width, height=image.height, media_format=media_format)
        self.items.append(item)
        self.images[item_id] = image
        return item

    def touch(self, item_id: str, modified_at: float) -> None:
        self.items = [replace(i, modified_at=modified_at) if i.item_id == item_id else i
                      for i in self.items]

    def enumerate(self) -> List[Item]:
        if self.enumerate_error is not None:
            raise self.enumerate_error
        return [replace(i) for i in self.items]

    def fetch_downscaled(self, item_id: str, target_size: Tuple[int, int]) -> bytes:
        self.fetch_calls += 1
        self.requested_sizes.append(tuple(target_size))
        if item_id in self.failing or item_id not in self.images:
            raise FetchError(item_id, "unavailable")
        if item_id in self.corrupt:
            return b"definitely not an image"
        img = self.images[item_id].copy()
        img.thumbnail(target_size)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def fetch_original(self, item_id: str) -> bytes:
        return self.fetch_downscaled(item_id, self.images[item_id].size)

    def resolve_exists(self, item_ids: Iterable[str]) -> Set[str]:
        return set(item_ids) & {i.item_id for i in self.items}

    def delete(self, item_ids: Iterable[str]) -> None:
        ids = list(item_ids)
        missing = set(ids) - self.resolve_exists(ids)
        if missing:
            raise DeleteError("missing items", sorted(missing))
        self.items = [i for i in self.items if i.item_id not in set(ids)]
        for item_id in ids:
            self.images.pop(item_id, None)


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def backend():
    return MemoryStateBackend()


@pytest.fixture
def record_store(backend):
    return ScanRecordStore(backend)


@pytest.fixture
def result_cache(backend):
    return ResultCache(backend)


@pytest.fixture
def config():
    return ScanConfig()


@pytest.fixture
def db_manager(tmp_path):
    """Fresh SQLite database for each test."""
    manager = DatabaseManager(tmp_path / "state" / "dupe_finder.db")
    yield manager
    manager.close()


@pytest.fixture
def image_dir(tmp_path):
    """Folder with an exact duplicate pair, one unrelated image and a non-image file."""
    root = tmp_path / "photos"
    (root / "sub").mkdir(parents=True)
    original = noise_image(7)
    original.save(root / "a.png")
    original.save(root / "sub" / "b.png")
    noise_image(99).save(root / "c.png")
    (root / "notes.txt").write_text("not an image")
    return root
