from .diff_range import diff_range

__all__ = ["diff_range"]
