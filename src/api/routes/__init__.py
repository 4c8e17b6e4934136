from . import active, system

__all__ = ["active", "system"]
