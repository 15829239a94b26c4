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
Created: 2025-07-11
Description: Base class and functions to ease exception tracing in a string and walking
            chains of causes.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"


import traceback
from collections.abc import Iterator


def format_exception(e: BaseException) -> str:
    """Format the provided exception to a string with its traceback.

    Args:
        e (BaseException): The exception to format.

    Returns:
        str: The string representation of the exception with its traceback.
    """
    return "".join(traceback.format_exception(type(e), e, e.__traceback__))


def cause_of(e: BaseException) -> object | None:
    """Get the direct cause of an exception.

    The diagnostic capability (a `source()` method) has priority over `__cause__`, so that
    leaf causes which are not exceptions are reported too. When `source()` gives None, the
    `__cause__` set by `raise ... from ...` is used.

    Args:
        e (BaseException): The exception to get the cause of.

    Returns:
        object | None: The cause or None if there is none.
    """
    source = getattr(e, "source", None)
    if callable(source):
        cause = source()
        if cause is not None:
            return cause
    return e.__cause__


def iter_causes(e: BaseException) -> Iterator[object]:
    """Iterate over the chain of causes of an exception, nearest first. The exception itself is
    not yielded. Cycles are cut.

    Args:
        e (BaseException): The exception to walk from.

    Yields:
        object: Each cause in turn.
    """
    seen = {id(e)}
    current: object | None = cause_of(e)
    while current is not None and id(current) not in seen:
        yield current
        seen.add(id(current))
        if not isinstance(current, BaseException):
            return
        current = cause_of(current)


class TracedException(Exception):
    """Base traceable exception class."""

    def traceback_format(self) -> str:
        """Format the exception to a string with its traceback.

        Returns:
            str: The string representation of the exception with its traceback.
        """
        return format_exception(self)

    def causes(self) -> list[object]:
        """List the chain of causes of this exception, nearest first."""
        return list(iter_causes(self))
