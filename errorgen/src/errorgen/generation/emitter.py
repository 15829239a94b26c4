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
Created: 2025-08-03
Description: Emission of the generated capabilities as Python source text, and
            materialization of that text into functions. For each record or variant:
            - __init__: stores the fields and links the cause;
            - __str__: the compiled message template;
            - __repr__: the debug representation;
            - source: the diagnostic capability.
            For a record or tagged union with conversions, one conversion constructor per
            entry.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import builtins
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..meta.classes.constants import GeneratedNames
from .conversions import ConversionEntry
from .resolution import ResolvedItem, ResolvedSpec
from .schema import FieldsKind
from .templates import LiteralText

logger = logging.getLogger(__name__)

INDENT = "    "

# Helpers are reached under dunder names, out of reach of field names used as parameters.
EXCEPTION_INIT = "__errorgen_exception_init__"
BASE_EXCEPTION = "__errorgen_base_exception__"
IS_INSTANCE = "__errorgen_isinstance__"

EMISSION_GLOBALS: dict[str, Any] = {
    "__builtins__": builtins,
    EXCEPTION_INIT: Exception.__init__,
    BASE_EXCEPTION: BaseException,
    IS_INSTANCE: isinstance,
}


class Binding(Enum):
    """How an emitted function is bound on its class."""

    METHOD = "method"
    CLASSMETHOD = "classmethod"


@dataclass(frozen=True)
class EmittedFunction:
    """Source text of one generated function."""

    owner: str
    name: str
    binding: Binding
    source: str

    @property
    def qualified_name(self) -> str:
        return f"{self.owner}.{self.name}"


@dataclass(frozen=True)
class EmittedCode:
    """Everything emitted for one error type, in emission order."""

    item: str
    functions: tuple[EmittedFunction, ...]
    conversions: tuple[ConversionEntry, ...] = ()

    @property
    def text(self) -> str:
        """The whole emitted source."""
        return "\n\n".join(f"# {f.qualified_name}\n{f.source}" for f in self.functions)

    def for_owner(self, owner: str) -> tuple[EmittedFunction, ...]:
        return tuple(f for f in self.functions if f.owner == owner)


def _concat(parts: Iterable[tuple[bool, str]]) -> str:
    """Expression concatenating parts, each either a literal (True) or a string expression
    (False). Adjacent literals are merged.
    """
    merged: list[tuple[bool, str]] = []
    for is_literal, text in parts:
        if is_literal and merged and merged[-1][0]:
            merged[-1] = (True, merged[-1][1] + text)
        elif not is_literal or text:
            merged.append((is_literal, text))

    exprs = [repr(text) if is_literal else text for is_literal, text in merged]
    if not exprs:
        return "''"
    if len(exprs) == 1:
        return exprs[0]
    return f"''.join(({', '.join(exprs)}))"


def _function(name: str, params: str, body: list[str]) -> str:
    return "\n".join([f"def {name}({params}):", *(INDENT + line for line in body)])


def _emit_init(item: ResolvedItem) -> str:
    names = item.shape.names
    body = [f"self.{n} = {n}" for n in names]
    body.append(f"{EXCEPTION_INIT}({', '.join(('self', *names))})")
    if item.cause is not None and item.cause.chains:
        cause = f"self.{item.cause.field.name}"
        body.append(f"if {IS_INSTANCE}({cause}, {BASE_EXCEPTION}):")
        body.append(f"{INDENT}self.__cause__ = {cause}")
    return _function(GeneratedNames.INIT, ", ".join(("self", *names)), body)


def _emit_str(item: ResolvedItem) -> str:
    expression = _concat(
        (True, s.text) if isinstance(s, LiteralText) else (False, f"str(self.{s.target})")
        for s in item.template.segments
    )
    return _function(GeneratedNames.STR, "self", [f"return {expression}"])


def _emit_repr(item: ResolvedItem) -> str:
    # the class knows its nesting, the spec only its own name.
    parts: list[tuple[bool, str]] = [(False, "type(self).__qualname__"), (True, "(")]
    for i, field in enumerate(item.shape.fields):
        if i:
            parts.append((True, ", "))
        if item.shape.kind is FieldsKind.NAMED:
            parts.append((True, f"{field.name}="))
        parts.append((False, f"repr(self.{field.name})"))
    parts.append((True, ")"))
    return _function(GeneratedNames.REPR, "self", [f"return {_concat(parts)}"])


def _emit_source(item: ResolvedItem) -> str:
    target = f"self.{item.cause.field.name}" if item.cause is not None else "None"
    return _function(GeneratedNames.SOURCE, "self", [f"return {target}"])


def _emit_conversion(entry: ConversionEntry) -> str:
    target = "cls" if entry.variant is None else f"cls.{entry.variant}"
    call = f"{target}({entry.field.name}=value)"
    return _function(entry.function_name, "cls, value", [f"return {call}"])


def emit_item(item: ResolvedItem) -> tuple[EmittedFunction, ...]:
    """Emit the constructor and the three capabilities of a record or variant."""
    owner = item.qualified_name
    return (
        EmittedFunction(owner, GeneratedNames.INIT, Binding.METHOD, _emit_init(item)),
        EmittedFunction(owner, GeneratedNames.STR, Binding.METHOD, _emit_str(item)),
        EmittedFunction(owner, GeneratedNames.REPR, Binding.METHOD, _emit_repr(item)),
        EmittedFunction(owner, GeneratedNames.SOURCE, Binding.METHOD, _emit_source(item)),
    )


def emit(resolved: ResolvedSpec) -> EmittedCode:
    """Emit the code of a resolved error type.

    Emission is a deterministic function of the resolved spec: emitting the same spec twice
    gives the same text.

    Args:
        resolved (ResolvedSpec): The resolved error type.

    Returns:
        EmittedCode: The emitted functions, items in declaration order, conversions last.
    """
    functions: list[EmittedFunction] = []
    for item in resolved.items:
        functions.extend(emit_item(item))
    for entry in resolved.conversions:
        functions.append(
            EmittedFunction(
                resolved.spec.name,
                entry.function_name,
                Binding.CLASSMETHOD,
                _emit_conversion(entry),
            )
        )
    logger.debug("Emitted %d functions for '%s'.", len(functions), resolved.spec.name)
    return EmittedCode(resolved.spec.name, tuple(functions), resolved.conversions)


def materialize(
    function: EmittedFunction, namespace: dict[str, Any] | None = None
) -> Callable[..., Any]:
    """Execute the source of an emitted function and return the function object.

    Args:
        function (EmittedFunction): The emitted function.
        namespace (dict[str, Any] | None): Extra globals visible to the function.

    Returns:
        Callable[..., Any]: The function, with its qualified name set. Class methods are
            returned unbound; wrap them with classmethod() when installing them.
    """
    env = {**EMISSION_GLOBALS, **(namespace or {})}
    local: dict[str, Any] = {}
    exec(function.source, env, local)  # pylint: disable=exec-used
    fn = local[function.name]
    fn.__qualname__ = function.qualified_name
    return fn
