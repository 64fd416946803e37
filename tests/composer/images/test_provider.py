"""
Tests for composer.images.provider

Test Coverage:
- DirectoryImageSource.resolve(): path mapping and traversal refusal
- DirectoryImageSource.open(): decoding and error mapping
"""
import pytest

from lostsword_toolkit.composer.images import DirectoryImageSource, ImageNotFoundError


class TestResolve:
    """Tests for catalog path resolution."""

    def test_leading_slash_is_relative_to_root(self, asset_root):
        source = DirectoryImageSource(asset_root)

        assert source.resolve("/assets/char/h1.png") == source.root / "assets" / "char" / "h1.png"

    def test_query_string_is_ignored(self, asset_root):
        source = DirectoryImageSource(asset_root)

        assert source.resolve("/assets/char/h1.png?v=3").name == "h1.png"

    @pytest.mark.parametrize("src", ["", "/", "/assets/../../etc/passwd"])
    def test_invalid_sources_are_refused(self, asset_root, src):
        with pytest.raises(ImageNotFoundError):
            DirectoryImageSource(asset_root).resolve(src)


class TestOpen:
    """Tests for image decoding."""

    def test_returns_rgba(self, asset_root):
        image = DirectoryImageSource(asset_root).open("/assets/card/k1.png")

        assert image.mode == "RGBA"
        assert image.size == (40, 40)

    def test_missing_file_raises(self, asset_root):
        with pytest.raises(ImageNotFoundError, match="not found"):
            DirectoryImageSource(asset_root).open("/assets/char/nobody.png")

    def test_undecodable_file_raises(self, asset_root):
        (asset_root / "assets" / "broken.png").write_bytes(b"not an image")

        with pytest.raises(ImageNotFoundError, match="Could not decode"):
            DirectoryImageSource(asset_root).open("/assets/broken.png")
