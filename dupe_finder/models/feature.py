"""
Similarity descriptor wrapping a perceptual hash.
"""

import imagehash


class FeatureVector:
    """Fixed-length bit descriptor of an image's visual content."""

    def __init__(self, phash: imagehash.ImageHash):
        self.phash = phash

    @classmethod
    def from_hex(cls, hex_str: str) -> 'FeatureVector':
        return cls(imagehash.hex_to_hash(hex_str))

    def __len__(self) -> int:
        return self.phash.hash.size

    def distance(self, other: 'FeatureVector') -> float:
        """Normalised Hamming distance: 0.0 identical, 1.0 every bit differs."""
        if len(self) != len(other):
            raise ValueError(f"Descriptor size mismatch: {len(self)} != {len(other)}")
        return (self.phash - other.phash) / len(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureVector):
            return NotImplemented
        return self.phash == other.phash

    def __hash__(self) -> int:
        return hash(str(self.phash))

    def __str__(self) -> str:
        return str(self.phash)

    def __repr__(self):
        return f"<FeatureVector {self.phash}>"
