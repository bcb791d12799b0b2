"""Output module.

Components:
    export: PNG export of rendered frames via Pillow
"""

from .export import load_png, save_png, save_png_from_array

__all__ = ["load_png", "save_png", "save_png_from_array"]
