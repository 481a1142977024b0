"""Single-page image PDF assembly."""

from .writer import ByteBuffer, PdfImageWriter, assemble, encode_jpeg

__all__ = ["ByteBuffer", "PdfImageWriter", "assemble", "encode_jpeg"]
