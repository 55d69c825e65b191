from .settings import CartAdvancedSettings

__all__ = ["CartAdvancedSettings"]
