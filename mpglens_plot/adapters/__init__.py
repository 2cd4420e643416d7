from .normalize import normalize_scatter

__all__ = ["normalize_scatter"]
