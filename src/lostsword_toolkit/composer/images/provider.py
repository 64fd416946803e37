"""
Module: composer.images.provider

Purpose:
    Abstract interface for turning an asset ``src`` into a decoded image.
    Keeps the cache independent of where images live.

Key Classes:
    - ImageSource: Abstract base class for image access
    - DirectoryImageSource: Resolves catalog paths under an asset root
    - ImageNotFoundError: Exception for missing images

Dependencies:
    - PIL: Image decoding

Used By:
    - composer.images.cache: Background loads
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class ImageNotFoundError(Exception):
    """Image source could not be resolved or decoded."""
    pass


class ImageSource(ABC):
    """
    Abstract interface for loading asset images.

    Implementations must be safe to call from worker threads.
    """

    @abstractmethod
    def open(self, src: str) -> Image.Image:
        """
        Load and fully decode the image for ``src``.

        Args:
            src: Asset source identifier like "/assets/char/c_012.png"

        Returns:
            Decoded RGBA PIL Image

        Raises:
            ImageNotFoundError: If the source is missing or undecodable
        """


class DirectoryImageSource(ImageSource):
    """
    Source that reads catalog paths from a local asset root.

    Leading slashes are stripped so "/assets/x.png" resolves to
    ``root / "assets/x.png"``. Paths escaping the root are refused.

    Example:
        >>> source = DirectoryImageSource(Path("public"))
        >>> source.open("/assets/lane-back.png").mode
        'RGBA'
    """

    def __init__(self, root: Path) -> None:
        """
        Initialize source.

        Args:
            root: Directory that catalog paths are relative to
        """
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        """Resolved asset root."""
        return self._root

    def resolve(self, src: str) -> Path:
        """
        Filesystem path for ``src``.

        Raises:
            ImageNotFoundError: If src is empty or points outside the root
        """
        relative = PurePosixPath(src.split("?", 1)[0].lstrip("/"))
        if not relative.parts or ".." in relative.parts:
            raise ImageNotFoundError(f"Invalid image source: {src!r}")
        return self._root.joinpath(*relative.parts)

    def open(self, src: str) -> Image.Image:
        """Load ``src`` from disk and convert to RGBA."""
        path = self.resolve(src)
        if not path.is_file():
            raise ImageNotFoundError(f"Image not found: {path}")
        try:
            with Image.open(path) as img:
                img.load()
                return img.convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            raise ImageNotFoundError(f"Could not decode {path}: {e}") from e
