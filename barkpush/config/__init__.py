from .bark import BarkConfig

__all__ = ["BarkConfig"]
