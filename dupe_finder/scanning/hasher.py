#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exact-duplicate fingerprints for the Duplicate Finder.
"""

import hashlib
import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..config import HASH_TARGET_SIZE, HASH_JPEG_QUALITY
from ..errors import FetchError
from ..models.item import Item

logger = logging.getLogger(__name__)


def fingerprint_image(img: Image.Image, size: Tuple[int, int] = HASH_TARGET_SIZE,
                      quality: int = HASH_JPEG_QUALITY) -> str:
    """
    SHA-256 over a normalised JPEG rendition of the image.

    The image is flattened to RGB at exactly `size` and re-encoded without
    metadata, so container differences such as EXIF blocks do not change
    the fingerprint.
    """
    normalised = img.convert("RGB").resize(size, Image.Resampling.BILINEAR)
    buf = io.BytesIO()
    normalised.save(buf, format="JPEG", quality=quality, optimize=False, progressive=False)
    return hashlib.sha256(buf.getvalue()).hexdigest()


class ContentHasher:
    """Computes the exact-match fingerprint of catalogue items."""

    def __init__(self, catalog, target_size: Tuple[int, int] = HASH_TARGET_SIZE,
                 quality: int = HASH_JPEG_QUALITY):
        self.catalog = catalog
        self.target_size = target_size
        self.quality = quality

    def compute(self, item: Item) -> Optional[str]:
        """Fingerprint for the item, or None when it cannot be fetched or decoded."""
        try:
            data = self.catalog.fetch_downscaled(item.item_id, self.target_size)
        except FetchError as e:
            logger.debug("No fingerprint for %s: %s", item.item_id, e)
            return None
        try:
            with Image.open(io.BytesIO(data)) as img:
                return fingerprint_image(img, self.target_size, self.quality)
        except (OSError, UnidentifiedImageError, ValueError) as e:
            logger.debug("Cannot decode %s for fingerprinting: %s", item.item_id, e)
            return None
