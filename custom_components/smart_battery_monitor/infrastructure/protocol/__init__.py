"""Text protocol implementations.

This module contains implementations of the protocol layer interfaces
defined in the domain layer.
"""

from .line_assembler import LineAssembler
from .text_frame_codec import TextFrameCodec

__all__ = [
    "LineAssembler",
    "TextFrameCodec",
]
