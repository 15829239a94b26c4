"""Resolution of an ErrorSpec: compiled templates, causes and conversion table."""

from __future__ import annotations

from dataclasses import dataclass

from .attributes import ErrorSpec
from .causes import CauseDesignation, resolve_cause
from .conversions import ConversionEntry, plan_conversions
from .errors import MissingMessageConfiguration
from .schema import FieldShape
from .templates import CompiledTemplate, compile_template


@dataclass(frozen=True)
class ResolvedItem:
    """A record, or one variant of a tagged union, ready for emission."""

    qualified_name: str
    variant: str | None
    shape: FieldShape
    template: CompiledTemplate
    cause: CauseDesignation | None


@dataclass(frozen=True)
class ResolvedSpec:
    """A fully resolved ErrorSpec. Items follow the declaration order of the variants."""

    spec: ErrorSpec
    items: tuple[ResolvedItem, ...]
    conversions: tuple[ConversionEntry, ...] = ()


def _resolve_item(
    qualified_name: str,
    variant: str | None,
    shape: FieldShape,
    message: str,
    cause: str | int | None,
) -> ResolvedItem:
    template = compile_template(message, shape, qualified_name)
    designation = resolve_cause(qualified_name, shape, template, cause)
    return ResolvedItem(qualified_name, variant, shape, template, designation)


def resolve_spec(spec: ErrorSpec) -> ResolvedSpec:
    """Compile the templates, resolve the causes and plan the conversions of an ErrorSpec.

    Stages run in that order; the first failure aborts the item.

    Raises:
        MissingMessageConfiguration: Raised when a record spec carries no message.
    """
    if not spec.is_union:
        if spec.message is None:
            raise MissingMessageConfiguration(spec.name)
        items = (_resolve_item(spec.name, None, spec.shape, spec.message, spec.cause),)
    else:
        items = tuple(
            _resolve_item(v.qualified_name, v.name, v.shape, v.message, v.cause)
            for v in spec.variants
        )
    return ResolvedSpec(spec, items, plan_conversions(spec))
