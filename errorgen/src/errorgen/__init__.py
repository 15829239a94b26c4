"""
errorgen: Error types generated when their class statement runs.

This library provides:
- ErrorRecord and ErrorUnion base classes whose message, cause and conversions are generated
- A message template language referring to the fields of the error
- The generation pipeline, usable on its own from TypeSchema descriptions
- TracedException for enhanced exception formatting and cause chains
"""

from .abstract.exceptions import TracedException, format_exception, iter_causes
from .errors import (
    ErrorCompositionError,
    ErrorInstantiationError,
    GenerationError,
    TemplateSyntaxError,
    UnresolvedFieldReference,
    MissingMessageConfiguration,
    InvalidCauseDesignation,
    DuplicateConversionTarget,
    InvalidConfiguration,
)
from .meta.classes.error_types import ErrorRecord, ErrorUnion, Variant

__version__ = "0.1.0"
__author__ = "Sébastien Gachoud"
__license__ = "MIT"

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Declarations
    "ErrorRecord",
    "ErrorUnion",
    "Variant",
    # Exceptions
    "TracedException",
    "format_exception",
    "iter_causes",
    # Errors
    "ErrorCompositionError",
    "ErrorInstantiationError",
    "GenerationError",
    "TemplateSyntaxError",
    "UnresolvedFieldReference",
    "MissingMessageConfiguration",
    "InvalidCauseDesignation",
    "DuplicateConversionTarget",
    "InvalidConfiguration",
]
