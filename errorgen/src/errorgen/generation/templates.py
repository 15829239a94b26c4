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
Description: Compiler of message templates. A template is compiled once, against the shape of
            the record or variant it belongs to, into a sequence of literal text runs and
            resolved placeholders. The syntax is:
            - literal text, with '{{' and '}}' for literal braces;
            - {self.<name>}: a named field;
            - {_<index>}: a positional field, zero-based;
            - {<name>}: shorthand for {self.<name>} on named shapes.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, TypeAlias

from .errors import TemplateSyntaxError, UnresolvedFieldReference
from .schema import POSITIONAL_NAME, FieldSchema, FieldShape, FieldsKind

logger = logging.getLogger(__name__)

SELF_PREFIX = "self."


class PlaceholderKind(Enum):
    """Syntactic form of a placeholder."""

    SELF_NAMED = "self-named-field"
    POSITIONAL = "positional-field"
    BARE = "bare-field-shorthand"


@dataclass(frozen=True)
class LiteralText:
    """A run of literal text, braces unescaped."""

    text: str


@dataclass(frozen=True)
class PlaceholderRef:
    """A template hole resolved to a field of the enclosing record or variant."""

    raw: str
    kind: PlaceholderKind
    field: FieldSchema

    @property
    def target(self) -> str:
        """Attribute holding the referenced field on an instance."""
        return self.field.name

    @property
    def annotation(self) -> Any:
        return self.field.annotation


Segment: TypeAlias = LiteralText | PlaceholderRef


@dataclass(frozen=True)
class CompiledTemplate:
    """A template compiled into its ordered segments."""

    source: str
    segments: tuple[Segment, ...]

    @property
    def placeholders(self) -> tuple[PlaceholderRef, ...]:
        return tuple(s for s in self.segments if isinstance(s, PlaceholderRef))

    def references(self, field: FieldSchema) -> bool:
        """Whether any placeholder refers to the field."""
        return any(p.field == field for p in self.placeholders)

    def render(self, instance: Any) -> str:
        """Evaluate the template for an instance, fields being read as attributes.

        Generated `__str__` methods evaluate the same segments; this is the reference evaluator.
        """
        return "".join(
            s.text if isinstance(s, LiteralText) else str(getattr(instance, s.target))
            for s in self.segments
        )


def _classify(body: str) -> tuple[PlaceholderKind, str] | None:
    """Get the form of a placeholder body and the field it names, None if malformed."""
    if body.startswith(SELF_PREFIX):
        name = body[len(SELF_PREFIX):]
        return (PlaceholderKind.SELF_NAMED, name) if name.isidentifier() else None
    if POSITIONAL_NAME.fullmatch(body):
        return PlaceholderKind.POSITIONAL, body
    if body.isidentifier():
        return PlaceholderKind.BARE, body
    return None


def _resolve(owner: str, body: str, kind: PlaceholderKind, name: str, shape: FieldShape):
    if kind is PlaceholderKind.POSITIONAL and shape.kind is FieldsKind.POSITIONAL:
        index = int(name[1:])
        field = shape.by_index(index)
        if field is None:
            raise UnresolvedFieldReference(
                owner, body, name, f"there is no positional field {index} among {len(shape)}."
            )
        return PlaceholderRef(body, kind, field)

    if kind is PlaceholderKind.POSITIONAL:
        # '_<digits>' is also an identifier, it may name a field of a named shape.
        kind = PlaceholderKind.BARE

    if shape.kind is not FieldsKind.NAMED:
        raise UnresolvedFieldReference(
            owner, body, name, f"a {shape.kind.value} shape has no named field '{name}'."
        )
    field = shape.by_name(name)
    if field is None:
        raise UnresolvedFieldReference(
            owner, body, name, f"there is no field '{name}' among {list(shape.names)}."
        )
    return PlaceholderRef(body, kind, field)


def compile_template(template: str, shape: FieldShape, owner: str) -> CompiledTemplate:
    """Compile a message template against the shape of its record or variant.

    Compilation is pure; compiled templates are cached by (template, shape, owner). A shape
    whose annotations cannot be hashed, such as `Annotated[int, {"unit": "ms"}]`, is compiled
    without the cache.

    Examples:
        >>> shape = FieldShape.named({"response_code": int})
        >>> compiled = compile_template("code {self.response_code}!", shape, "HttpError")
        >>> [type(s).__name__ for s in compiled.segments]
        ['LiteralText', 'PlaceholderRef', 'LiteralText']

    Args:
        template (str): The template text.
        shape (FieldShape): The fields the placeholders may refer to.
        owner (str): The record or qualified variant name, for error messages.

    Raises:
        TemplateSyntaxError: Raised on malformed delimiters or placeholders.
        UnresolvedFieldReference: Raised when a placeholder names a field absent from the shape.

    Returns:
        CompiledTemplate: The compiled template.
    """
    try:
        hash(shape)
    except TypeError:
        return _compile(template, shape, owner)
    return _compile_cached(template, shape, owner)


def _compile(template: str, shape: FieldShape, owner: str) -> CompiledTemplate:
    segments: list[Segment] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            segments.append(LiteralText("".join(literal)))
            literal.clear()

    i, n = 0, len(template)
    while i < n:
        c = template[i]
        if c == "}":
            if template.startswith("}}", i):
                literal.append("}")
                i += 2
                continue
            raise TemplateSyntaxError(owner, template, i, "single '}' outside a placeholder")
        if c != "{":
            literal.append(c)
            i += 1
            continue
        if template.startswith("{{", i):
            literal.append("{")
            i += 2
            continue

        end = template.find("}", i + 1)
        stop = end if end != -1 else n
        nested = template.find("{", i + 1, stop)
        if nested != -1 or end == -1:
            raise TemplateSyntaxError(
                owner,
                template,
                i,
                "unterminated placeholder",
                template[i + 1 : nested if nested != -1 else stop],
            )
        body = template[i + 1 : end]
        form = _classify(body)
        if form is None:
            reason = "empty placeholder" if not body else f"malformed placeholder '{{{body}}}'"
            raise TemplateSyntaxError(owner, template, i, reason, body)

        flush()
        segments.append(_resolve(owner, body, *form, shape))
        i = end + 1

    flush()
    logger.debug("Compiled message template of '%s' into %d segments.", owner, len(segments))
    return CompiledTemplate(template, tuple(segments))


_compile_cached = lru_cache(maxsize=1024)(_compile)
