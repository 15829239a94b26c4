"""
MIT License

Copyright (c) 2025 Sébastien Gachoud

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

-------------------------------------------------------------------------------

Author: Sébastien Gachoud
Created: 2025-08-02
Description: The type schema consumed by the generator. A schema describes the shape of one
            error type, a record or a tagged union, along with the raw options attached to
            it. How a schema is obtained is up to the front-end.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import keyword
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from ..meta.typing.utilities import Annotation

POSITIONAL_NAME = re.compile(r"_(\d+)")


class ItemKind(Enum):
    """Kind of an annotated error type."""

    RECORD = "record"
    TAGGED_UNION = "tagged-union"


class FieldsKind(Enum):
    """Kind of a payload shape."""

    UNIT = "unit"
    POSITIONAL = "positional"
    NAMED = "named"


def positional_name(index: int) -> str:
    """Name under which a positional field is stored, e.g. '_0'."""
    return f"_{index}"


@dataclass(frozen=True)
class FieldSchema:
    """One field of a payload."""

    name: str
    index: int
    annotation: Annotation


@dataclass(frozen=True)
class FieldShape:
    """Fields carried by a record or a variant: none, positional ones or named ones."""

    kind: FieldsKind
    fields: tuple[FieldSchema, ...] = ()

    def __post_init__(self) -> None:
        if self.kind is FieldsKind.UNIT and self.fields:
            raise ValueError("A unit shape has no fields.")
        names = [f.name for f in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f"Field names must be unique, got {names}.")
        for i, f in enumerate(self.fields):
            if f.index != i:
                raise ValueError(f"Field '{f.name}' is at position {i} but has index {f.index}.")
            if self.kind is FieldsKind.POSITIONAL and f.name != positional_name(i):
                raise ValueError(f"Positional field {i} must be named '{positional_name(i)}'.")
            if not f.name.isidentifier() or keyword.iskeyword(f.name):
                raise ValueError(f"Field name '{f.name}' is not a valid identifier.")
            if f.name == "self":
                raise ValueError("Field name 'self' is reserved for the error itself.")

    @classmethod
    def unit(cls) -> FieldShape:
        return cls(FieldsKind.UNIT)

    @classmethod
    def positional(cls, *annotations: Annotation) -> FieldShape:
        """Create a positional shape. An empty one is a unit shape."""
        if not annotations:
            return cls.unit()
        return cls(
            FieldsKind.POSITIONAL,
            tuple(FieldSchema(positional_name(i), i, a) for i, a in enumerate(annotations)),
        )

    @classmethod
    def named(cls, annotations: Mapping[str, Annotation]) -> FieldShape:
        """Create a named shape, fields ordered as in the mapping. An empty one is a unit shape."""
        if not annotations:
            return cls.unit()
        return cls(
            FieldsKind.NAMED,
            tuple(FieldSchema(n, i, a) for i, (n, a) in enumerate(annotations.items())),
        )

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def single_field(self) -> FieldSchema | None:
        """The field of a one-field shape, None otherwise."""
        return self.fields[0] if len(self.fields) == 1 else None

    def by_name(self, name: str) -> FieldSchema | None:
        """Get a named field. Positional shapes have no named fields."""
        if self.kind is not FieldsKind.NAMED:
            return None
        return next((f for f in self.fields if f.name == name), None)

    def by_index(self, index: int) -> FieldSchema | None:
        """Get a positional field. Named shapes have no positional fields."""
        if self.kind is not FieldsKind.POSITIONAL or not 0 <= index < len(self.fields):
            return None
        return self.fields[index]


def _frozen(options: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(options or {}))


@dataclass(frozen=True)
class VariantSchema:
    """One case of a tagged union."""

    name: str
    shape: FieldShape = field(default_factory=FieldShape.unit)
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _frozen(self.options))


@dataclass(frozen=True)
class TypeSchema:
    """One annotated error type: a record with a single shape or a tagged union of variants."""

    name: str
    kind: ItemKind
    shape: FieldShape = field(default_factory=FieldShape.unit)
    variants: tuple[VariantSchema, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _frozen(self.options))
        object.__setattr__(self, "variants", tuple(self.variants))
        if self.kind is ItemKind.RECORD and self.variants:
            raise ValueError(f"Record '{self.name}' cannot have variants.")
        if self.kind is ItemKind.TAGGED_UNION and self.shape.fields:
            raise ValueError(f"Tagged union '{self.name}' cannot have fields of its own.")
        names = [v.name for v in self.variants]
        if len(set(names)) != len(names):
            raise ValueError(f"Variant names of '{self.name}' must be unique, got {names}.")

    @classmethod
    def record(
        cls, name: str, shape: FieldShape | None = None, **options: Any
    ) -> TypeSchema:
        return cls(name, ItemKind.RECORD, shape or FieldShape.unit(), options=options)

    @classmethod
    def tagged_union(
        cls, name: str, variants: tuple[VariantSchema, ...] | list[VariantSchema], **options: Any
    ) -> TypeSchema:
        return cls(name, ItemKind.TAGGED_UNION, variants=tuple(variants), options=options)
