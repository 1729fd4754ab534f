from .manifest_mapper import ManifestBatch, ManifestDecoder
from .manifest_loader import ManifestLoader

__all__ = [
    "ManifestBatch",
    "ManifestDecoder",
    "ManifestLoader",
]
