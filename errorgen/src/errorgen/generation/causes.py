"""Resolution of the causal error exposed by a record or variant through `source()`."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..meta.typing.utilities import offers_diagnostic
from .errors import InvalidCauseDesignation
from .schema import POSITIONAL_NAME, FieldSchema, FieldShape
from .templates import CompiledTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CauseDesignation:
    """The field holding the cause of a record or variant.

    `chains` tells whether the field type offers the diagnostic capability itself. A field that
    does not is a leaf: it is returned by `source()` but not linked as `__cause__`.
    """

    field: FieldSchema
    explicit: bool
    chains: bool


def _designated_field(shape: FieldShape, designation: str | int) -> FieldSchema | None:
    if isinstance(designation, int):
        return shape.by_index(designation)
    match = POSITIONAL_NAME.fullmatch(designation)
    field = shape.by_index(int(match.group(1))) if match else None
    return field or shape.by_name(designation)


def resolve_cause(
    owner: str,
    shape: FieldShape,
    template: CompiledTemplate,
    designation: str | int | None = None,
) -> CauseDesignation | None:
    """Determine which field, if any, holds the cause of a record or variant.

    An explicit designation always wins. Without one, only a single-field payload referenced by
    the template and whose type offers the diagnostic capability is inferred as the cause.
    Multi-field payloads are never inferred.

    Args:
        owner (str): The record or qualified variant name.
        shape (FieldShape): The payload.
        template (CompiledTemplate): The compiled message of the record or variant.
        designation (str | int | None): The explicit cause option, if any.

    Raises:
        InvalidCauseDesignation: Raised when the designation names no field of the shape.

    Returns:
        CauseDesignation | None: The cause, or None if the item exposes none.
    """
    if designation is not None:
        field = _designated_field(shape, designation)
        if field is None:
            raise InvalidCauseDesignation(owner, designation)
        return CauseDesignation(field, explicit=True, chains=offers_diagnostic(field.annotation))

    field = shape.single_field
    if field is None or not template.references(field):
        return None
    if not offers_diagnostic(field.annotation):
        return None
    logger.debug("Inferred field '%s' as the cause of '%s'.", field.name, owner)
    return CauseDesignation(field, explicit=False, chains=True)
