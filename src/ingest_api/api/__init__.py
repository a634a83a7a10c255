from . import knowledge

__all__ = ["knowledge"]
