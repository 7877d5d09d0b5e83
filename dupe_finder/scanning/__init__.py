"""Scanning and processing modules for the Duplicate Finder."""

from .feature_cache import FeatureCache
from .hasher import ContentHasher, fingerprint_image
from .extractor import FeatureExtractor
from .scanner import ScanOrchestrator

__all__ = [
    'FeatureCache',
    'ContentHasher',
    'fingerprint_image',
    'FeatureExtractor',
    'ScanOrchestrator',
]
