"""Extraction of the per-item configuration of an error type into an ErrorSpec."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from ..meta.classes.constants import ConfigKeys, RECORD_KEYS, UNION_KEYS, VARIANT_KEYS
from .errors import InvalidConfiguration, MissingMessageConfiguration
from .schema import FieldShape, ItemKind, TypeSchema, VariantSchema

logger = logging.getLogger(__name__)

CauseOption: TypeAlias = str | int | None


@dataclass(frozen=True)
class VariantSpec:
    """One case of a tagged-union ErrorSpec."""

    name: str
    qualified_name: str
    shape: FieldShape
    message: str
    message_override: str | None = None
    cause: CauseOption = None
    # None follows the tagged union.
    generate_conversions: bool | None = None

    @property
    def inherits_message(self) -> bool:
        return self.message_override is None


@dataclass(frozen=True)
class ErrorSpec:
    """The generation plan of one annotated error type, before templates are compiled.

    For a record, `message` is its template. For a tagged union, `message` is the default
    inherited by the variants without an override, and may be None when every variant has one.
    """

    name: str
    kind: ItemKind
    shape: FieldShape
    message: str | None
    variants: tuple[VariantSpec, ...] = ()
    generate_conversions: bool = False
    cause: CauseOption = None

    @property
    def is_union(self) -> bool:
        return self.kind is ItemKind.TAGGED_UNION


def _check_keys(
    item: str, options: Mapping[str, Any], allowed: frozenset[str], scope: str
) -> None:
    for key in options:
        if key not in ConfigKeys.values():
            raise InvalidConfiguration(
                item, key, f"is unknown. Known options are {sorted(ConfigKeys.values())}."
            )
        if key not in allowed:
            raise InvalidConfiguration(item, key, f"is not allowed on a {scope}.")


def _message(item: str, options: Mapping[str, Any]) -> str | None:
    message = options.get(ConfigKeys.MESSAGE)
    if message is not None and not isinstance(message, str):
        raise InvalidConfiguration(
            item, ConfigKeys.MESSAGE, f"must be a string, got {type(message).__name__}."
        )
    return message


def _cause(item: str, options: Mapping[str, Any]) -> CauseOption:
    cause = options.get(ConfigKeys.CAUSE)
    # bool is an int, but True is certainly not a field index.
    if cause is None or (isinstance(cause, (str, int)) and not isinstance(cause, bool)):
        return cause
    raise InvalidConfiguration(
        item, ConfigKeys.CAUSE, f"must be a field name or index, got {cause!r}."
    )


def _flag(item: str, options: Mapping[str, Any], key: str) -> bool:
    value = options.get(key, False)
    if not isinstance(value, bool):
        raise InvalidConfiguration(item, key, f"must be a boolean, got {value!r}.")
    return value


def _parse_variant(
    union: str, default: str | None, union_conversions: bool, variant: VariantSchema
) -> VariantSpec:
    qualified_name = f"{union}.{variant.name}"
    _check_keys(qualified_name, variant.options, VARIANT_KEYS, "variant")
    override = _message(qualified_name, variant.options)
    message = override if override is not None else default
    if message is None:
        raise MissingMessageConfiguration(
            qualified_name, f" Give the variant a message or '{union}' a default message."
        )
    conversions = None
    if ConfigKeys.GENERATE_CONVERSIONS in variant.options:
        conversions = _flag(qualified_name, variant.options, ConfigKeys.GENERATE_CONVERSIONS)
        if conversions and union_conversions:
            raise InvalidConfiguration(
                qualified_name,
                ConfigKeys.GENERATE_CONVERSIONS,
                f"is set on both the variant and the tagged union '{union}'.",
            )
    return VariantSpec(
        name=variant.name,
        qualified_name=qualified_name,
        shape=variant.shape,
        message=message,
        message_override=override,
        cause=_cause(qualified_name, variant.options),
        generate_conversions=conversions,
    )


def parse_attributes(schema: TypeSchema) -> ErrorSpec:
    """Produce the ErrorSpec of an annotated error type from its raw options.

    Args:
        schema (TypeSchema): The shape and options of the error type.

    Raises:
        MissingMessageConfiguration: Raised when a record or a variant has no template.
        InvalidConfiguration: Raised on unknown options, options outside their scope or values
            of the wrong type.

    Returns:
        ErrorSpec: The generation plan of the error type.
    """
    if schema.kind is ItemKind.RECORD:
        _check_keys(schema.name, schema.options, RECORD_KEYS, "record")
        message = _message(schema.name, schema.options)
        if message is None:
            raise MissingMessageConfiguration(schema.name)
        conversions = _flag(schema.name, schema.options, ConfigKeys.GENERATE_CONVERSIONS)
        return ErrorSpec(
            name=schema.name,
            kind=schema.kind,
            shape=schema.shape,
            message=message,
            cause=_cause(schema.name, schema.options),
            generate_conversions=conversions,
        )

    _check_keys(schema.name, schema.options, UNION_KEYS, "tagged union")
    default = _message(schema.name, schema.options)
    conversions = _flag(schema.name, schema.options, ConfigKeys.GENERATE_CONVERSIONS)
    variants = tuple(
        _parse_variant(schema.name, default, conversions, v) for v in schema.variants
    )
    if default is not None and variants and all(not v.inherits_message for v in variants):
        logger.debug("Default message of '%s' is overridden by every variant.", schema.name)
    return ErrorSpec(
        name=schema.name,
        kind=schema.kind,
        shape=schema.shape,
        message=default,
        variants=variants,
        generate_conversions=conversions,
    )
