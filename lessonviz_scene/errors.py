from __future__ import annotations


class SceneFormatError(ValueError):
    """Raised when a payload cannot be read as an animation scene at all."""
