"""Planning of the conversion constructors of records and tagged unions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..meta.classes.constants import ConfigKeys, GeneratedNames
from ..meta.typing.utilities import dispatch_types
from .attributes import ErrorSpec
from .errors import DuplicateConversionTarget, InvalidConfiguration
from .schema import FieldSchema, FieldShape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionEntry:
    """Maps the payload type of a single-field record or variant to it.

    `variant` is None for the conversion of a record into itself.
    """

    payload_type: Any
    dispatch_types: tuple[Any, ...]
    variant: str | None
    field: FieldSchema

    @property
    def function_name(self) -> str:
        if self.variant is None:
            return GeneratedNames.RECORD_CONVERSION
        return f"{GeneratedNames.CONVERSION_PREFIX}{self.variant}"


def _single_field(item: str, shape: FieldShape) -> FieldSchema:
    field = shape.single_field
    if field is None:
        raise InvalidConfiguration(
            item,
            ConfigKeys.GENERATE_CONVERSIONS,
            f"requires exactly one field, '{item}' has {len(shape)}.",
        )
    return field


def _entry(field: FieldSchema, variant: str | None) -> ConversionEntry:
    return ConversionEntry(field.annotation, dispatch_types(field.annotation), variant, field)


def plan_conversions(spec: ErrorSpec) -> tuple[ConversionEntry, ...]:
    """Build the conversion table of a record or tagged union requesting conversions.

    A record requesting conversions must have exactly one field. For a tagged union, variants
    are visited in declaration order. A variant takes part when it requests conversions itself,
    in which case it must have exactly one field, or when the union requests them and the
    variant does not opt out; single-field variants then take part and the others are left
    out without error. The table is injective: a payload type already claimed by an earlier
    variant is an error, never resolved by order.

    Args:
        spec (ErrorSpec): The record or tagged union.

    Raises:
        InvalidConfiguration: Raised when an explicit request is made on a payload without
            exactly one field.
        DuplicateConversionTarget: Raised when two variants share a payload type.

    Returns:
        tuple[ConversionEntry, ...]: One entry per participating variant, in declaration order.
    """
    if not spec.is_union:
        if not spec.generate_conversions:
            return ()
        return (_entry(_single_field(spec.name, spec.shape), None),)

    # Dispatch keys are compared, not hashed: annotations may carry unhashable metadata.
    claimed: list[tuple[Any, ConversionEntry]] = []
    entries: list[ConversionEntry] = []
    for variant in spec.variants:
        if variant.generate_conversions:
            field = _single_field(variant.qualified_name, variant.shape)
        elif variant.generate_conversions is None and spec.generate_conversions:
            field = variant.shape.single_field
            if field is None:
                logger.debug(
                    "Variant '%s' has %d fields, no conversion is generated for it.",
                    variant.qualified_name,
                    len(variant.shape),
                )
                continue
        else:
            continue

        entry = _entry(field, variant.name)
        for key in entry.dispatch_types:
            earlier = next((e for k, e in claimed if k == key), None)
            if earlier is not None:
                raise DuplicateConversionTarget(spec.name, earlier.variant, variant.name, key)
            claimed.append((key, entry))
        entries.append(entry)
    return tuple(entries)
