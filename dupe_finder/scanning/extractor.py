#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Feature extraction for the Duplicate Finder.
"""

import io
import logging
import warnings
from typing import Optional

import imagehash
from PIL import Image, UnidentifiedImageError

from ..config import DEFAULT_MAX_IMAGE_DIMENSION, FEATURE_HASH_SIZE
from ..errors import FetchError
from ..models.feature import FeatureVector
from ..models.item import Item
from .feature_cache import FeatureCache

logger = logging.getLogger(__name__)

# Suppress PIL warnings
warnings.filterwarnings("ignore", category=UserWarning,
                        message=".*Palette images with Transparency expressed in bytes.*")


def _bounded_size(item: Item, max_dimension: int):
    width = min(max_dimension, item.width) if item.width else max_dimension
    height = min(max_dimension, item.height) if item.height else max_dimension
    return max(1, width), max(1, height)


class FeatureExtractor:
    """Perceptual-hash descriptors over a size-bounded rendition, with caching."""

    def __init__(self, catalog, max_dimension: int = DEFAULT_MAX_IMAGE_DIMENSION,
                 hash_size: int = FEATURE_HASH_SIZE, cache: Optional[FeatureCache] = None):
        self.catalog = catalog
        self.max_dimension = max_dimension
        self.hash_size = hash_size
        self.cache = cache if cache is not None else FeatureCache()

    def extract(self, item: Item) -> Optional[FeatureVector]:
        """Descriptor for the item, or None when it cannot be fetched or decoded."""
        key = (item.item_id, item.modified_at, self.max_dimension)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        bound = _bounded_size(item, self.max_dimension)
        try:
            data = self.catalog.fetch_downscaled(item.item_id, bound)
        except FetchError as e:
            logger.debug("No descriptor for %s: %s", item.item_id, e)
            return None
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.thumbnail((self.max_dimension, self.max_dimension))
                vector = FeatureVector(imagehash.phash(img, hash_size=self.hash_size))
        except (OSError, UnidentifiedImageError, ValueError) as e:
            logger.debug("Descriptor generation failed for %s: %s", item.item_id, e)
            return None

        self.cache.put(key, vector)
        return vector
