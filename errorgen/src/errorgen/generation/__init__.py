"""Generation pipeline of errorgen."""

from .attributes import ErrorSpec, VariantSpec, parse_attributes
from .causes import CauseDesignation, resolve_cause
from .conversions import ConversionEntry, plan_conversions
from .emitter import Binding, EmittedCode, EmittedFunction, emit, materialize
from .errors import (
    DuplicateConversionTarget,
    GenerationError,
    InvalidCauseDesignation,
    InvalidConfiguration,
    MissingMessageConfiguration,
    TemplateSyntaxError,
    UnresolvedFieldReference,
)
from .pipeline import (
    GeneratedError,
    GenerationFailure,
    GenerationReport,
    generate,
    generate_all,
)
from .resolution import ResolvedItem, ResolvedSpec, resolve_spec
from .schema import FieldSchema, FieldShape, FieldsKind, ItemKind, TypeSchema, VariantSchema
from .templates import (
    CompiledTemplate,
    LiteralText,
    PlaceholderKind,
    PlaceholderRef,
    compile_template,
)

__all__ = [
    # Schema
    "FieldSchema",
    "FieldShape",
    "FieldsKind",
    "ItemKind",
    "TypeSchema",
    "VariantSchema",
    # Stages
    "ErrorSpec",
    "VariantSpec",
    "parse_attributes",
    "CompiledTemplate",
    "LiteralText",
    "PlaceholderKind",
    "PlaceholderRef",
    "compile_template",
    "CauseDesignation",
    "resolve_cause",
    "ConversionEntry",
    "plan_conversions",
    "ResolvedItem",
    "ResolvedSpec",
    "resolve_spec",
    "Binding",
    "EmittedCode",
    "EmittedFunction",
    "emit",
    "materialize",
    # Pipeline
    "GeneratedError",
    "GenerationFailure",
    "GenerationReport",
    "generate",
    "generate_all",
    # Errors
    "GenerationError",
    "TemplateSyntaxError",
    "UnresolvedFieldReference",
    "MissingMessageConfiguration",
    "InvalidCauseDesignation",
    "DuplicateConversionTarget",
    "InvalidConfiguration",
]
