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
Description: The generation pipeline. Each error type goes through
            parse -> compile templates -> resolve causes -> plan conversions -> emit,
            independently of every other one.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from .attributes import ErrorSpec, parse_attributes
from .emitter import EmittedCode, emit
from .errors import GenerationError
from .resolution import ResolvedSpec, resolve_spec
from .schema import TypeSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedError:
    """Outcome of a successful generation."""

    spec: ErrorSpec
    resolved: ResolvedSpec
    code: EmittedCode


@dataclass(frozen=True)
class GenerationFailure:
    """An item whose generation was abandoned."""

    item: str
    error: GenerationError


@dataclass
class GenerationReport:
    """Outcome of the generation of several items. Both lists follow the input order."""

    generated: list[GeneratedError] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def __getitem__(self, item: str) -> GeneratedError:
        for generated in self.generated:
            if generated.spec.name == item:
                return generated
        raise KeyError(item)

    def raise_for_failures(self) -> None:
        """Raise the error of the first failed item, if any."""
        if self.failures:
            raise self.failures[0].error


def generate(schema: TypeSchema) -> GeneratedError:
    """Run the whole pipeline for one error type.

    Args:
        schema (TypeSchema): The error type.

    Raises:
        GenerationError: Raised by the first failing stage.

    Returns:
        GeneratedError: The ErrorSpec, its resolution and the emitted code.
    """
    spec = parse_attributes(schema)
    resolved = resolve_spec(spec)
    code = emit(resolved)
    logger.debug("Generated '%s'.", schema.name)
    return GeneratedError(spec, resolved, code)


def _generate_isolated(schema: TypeSchema) -> GeneratedError | GenerationFailure:
    try:
        return generate(schema)
    except GenerationError as e:
        logger.warning("Generation of '%s' failed: %s", schema.name, e)
        return GenerationFailure(schema.name, e)


def generate_all(
    schemas: Iterable[TypeSchema], *, max_workers: int | None = None
) -> GenerationReport:
    """Run the pipeline for several error types. A failing item is reported and does not stop
    the others.

    Args:
        schemas (Iterable[TypeSchema]): The error types.
        max_workers (int | None): Items are processed by a pool of this many threads when
            greater than 1, sequentially otherwise.

    Returns:
        GenerationReport: The generated items and the failures.
    """
    schemas = list(schemas)
    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(_generate_isolated, schemas))
    else:
        outcomes = [_generate_isolated(s) for s in schemas]

    report = GenerationReport()
    for outcome in outcomes:
        if isinstance(outcome, GenerationFailure):
            report.failures.append(outcome)
        else:
            report.generated.append(outcome)
    return report
