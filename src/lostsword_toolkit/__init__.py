"""Top-level package for the LostSword roster toolkit.

Provides subpackages:
- lostsword_toolkit.core – shared asset models
- lostsword_toolkit.catalog – catalog loading and picker helpers
- lostsword_toolkit.roster – slot and formation assignment state
- lostsword_toolkit.composer – layout, image cache and compositor
- lostsword_toolkit.gui – PySide6 preview widget
"""

def _get_version() -> str:
    """Get version from importlib.metadata (installed) or fall back to 0.0.0."""
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("lostsword-toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
