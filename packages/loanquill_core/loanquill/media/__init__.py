"""Media handling: image references and fonts."""

from .font_manager import FontFace, FontManager
from .image_loader import ImageLoader

__all__ = ["FontFace", "FontManager", "ImageLoader"]
