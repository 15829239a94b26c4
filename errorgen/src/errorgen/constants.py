"""
Re-export constants module for cleaner imports.

This allows: from errorgen.constants import ConfigKeys
Instead of: from errorgen.meta.classes.constants import ConfigKeys
"""

from .meta.classes.constants import (
    ConstantNamespace,
    ConstantsMetaclass,
    ConstantsCompositionError,
    ConstantsInstantiationError,
    ConstantsModificationError,
    ConfigKeys,
    GeneratedNames,
)

__all__ = [
    "ConstantNamespace",
    "ConstantsMetaclass",
    "ConstantsCompositionError",
    "ConstantsInstantiationError",
    "ConstantsModificationError",
    "ConfigKeys",
    "GeneratedNames",
]
