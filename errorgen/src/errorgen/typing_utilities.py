"""
Re-export utilities module for cleaner imports.

This allows: from errorgen.typing_utilities import offers_diagnostic
Instead of: from errorgen.meta.typing.utilities import offers_diagnostic
"""

from .meta.typing.utilities import (
    is_union,
    is_optional,
    is_class_var,
    resolve_annotation_types,
    offers_diagnostic,
    dispatch_types,
    strip_annotated,
)

__all__ = [
    "is_union",
    "is_optional",
    "is_class_var",
    "resolve_annotation_types",
    "offers_diagnostic",
    "dispatch_types",
    "strip_annotated",
]
