from .bootstrap import PaletteContext, init  # noqa: F401

__all__ = ["PaletteContext", "init"]
