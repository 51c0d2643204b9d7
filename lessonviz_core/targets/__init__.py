from .base import DisplayFrame, RenderTarget
from .headless import HeadlessTarget
from .image_sequence import ImageSequenceTarget

__all__ = ["DisplayFrame", "HeadlessTarget", "ImageSequenceTarget", "RenderTarget"]
