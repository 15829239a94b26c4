"""Exception utilities for errorgen."""

from .traced_exceptions import TracedException, cause_of, format_exception, iter_causes

__all__ = [
    "TracedException",
    "cause_of",
    "format_exception",
    "iter_causes",
]
