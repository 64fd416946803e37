"""
Module: composer.images

Purpose:
    Background image loading for the compositor.

Key Classes:
    - AssetCache: Coalescing, memoizing thread-pool loader
    - LoadBatch: Loads for one required-source set
    - ImageSource / DirectoryImageSource: Where images come from
"""

from .cache import AssetCache, LoadBatch
from .provider import DirectoryImageSource, ImageNotFoundError, ImageSource

__all__ = [
    "AssetCache",
    "LoadBatch",
    "DirectoryImageSource",
    "ImageNotFoundError",
    "ImageSource",
]
