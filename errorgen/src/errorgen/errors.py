"""
Re-export the errors of the library for cleaner imports.

This allows: from errorgen.errors import TemplateSyntaxError
Instead of: from errorgen.generation.errors import TemplateSyntaxError
"""

from .generation.errors import (
    GenerationError,
    TemplateSyntaxError,
    UnresolvedFieldReference,
    MissingMessageConfiguration,
    InvalidCauseDesignation,
    DuplicateConversionTarget,
    InvalidConfiguration,
)
from .meta.classes.error_types import ErrorCompositionError, ErrorInstantiationError

__all__ = [
    "GenerationError",
    "TemplateSyntaxError",
    "UnresolvedFieldReference",
    "MissingMessageConfiguration",
    "InvalidCauseDesignation",
    "DuplicateConversionTarget",
    "InvalidConfiguration",
    "ErrorCompositionError",
    "ErrorInstantiationError",
]
