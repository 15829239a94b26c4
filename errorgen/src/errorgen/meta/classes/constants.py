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
Description: This module provides immutable namespaces (class) of constants, and the
            constants of the generator: the option keys read from error definitions and
            the names of the generated members.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from collections.abc import Iterator
from typing import Any, NoReturn, Callable, ClassVar
from ...abstract.exceptions.traced_exceptions import TracedException
from ..typing.utilities import is_class_var, resolve_annotation_types


class ConstantsInstantiationError(TracedException):
    """Instantiation error of a Constants class."""


class ConstantsCompositionError(TracedException):
    """Composition error of a Constants class."""


class ConstantsModificationError(TracedException):
    """Modification error of a Constants class."""


def _verify_functions(name: str, namespace: dict[str, Any]) -> None:
    """Verify that no disalowed function is added.
    Disallowed functions are __new__ and __init__.

    Args:
        name (str): name of the class.
        namespace (dict[str, Any]): namespace of the class.

    Raises:
        ConstantsCompositionError: Raised when a disallowed function is added.
    """
    if "__init__" in namespace or "__new__" in namespace:
        raise ConstantsCompositionError(
            f"Constant class '{name}' is disallowed to have __new__ or __init__"
            " method since it shall never be instantiated."
        )


def _instantiation_error(name: str) -> Callable[[Any], NoReturn]:
    """Helper to format an error message when trying to instantiate a Constants class.

    Args:
        name (str): name of the class.

    Returns:
        Callable[[], NoReturn]: A callable that throws an instantiation error when called.
    """

    def f(_: Any) -> NoReturn:
        raise ConstantsInstantiationError(
            f"Cannot instantiate constant class '{name}'. Constant class cannot be instantiated."
        )

    return f


def _collect_constants(cls: type, allow_private: bool) -> tuple[str, ...]:
    """Collect the names of the constants of a freshly created class, inherited ones first.

    Args:
        cls (type): the class.
        allow_private (bool): whether names starting with '_' are constants.

    Raises:
        ConstantsCompositionError: Raised when an annotated member value is missing or does not
            match its annotation.

    Returns:
        tuple[str, ...]: the constant names.
    """
    try:
        annotations = resolve_annotation_types(cls)
    except NameError as e:
        raise ConstantsCompositionError(
            f"Could not resolve the annotations of constant class '{cls.__name__}': {e}"
        ) from e

    names: list[str] = []
    for base in cls.__bases__:
        if isinstance(base, ConstantsMetaclass):
            names.extend(k for k in base.__constants__ if k not in names)

    for key, annotation in annotations.items():
        if key.startswith("__") or (key.startswith("_") and not allow_private):
            continue
        # Ensure that any annotated member has a value.
        if key not in cls.__dict__:
            raise ConstantsCompositionError(
                f"Attribute '{key}' needs a value in constant class '{cls.__name__}'."
            )
        if is_class_var(annotation):
            continue
        value = cls.__dict__[key]
        if isinstance(annotation, type) and not isinstance(value, annotation):
            raise ConstantsCompositionError(
                f"Value {value!r} of constant '{key}' in class '{cls.__name__}' is not of"
                f" type {annotation.__name__}."
            )
        if key not in names:
            names.append(key)
    return tuple(names)


class ConstantsMetaclass(type):
    __constants__: tuple[str, ...]

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        /,
        allow_private: bool = False,
        **kwargs: Any,
    ) -> Any:

        # verify that no function is added.
        _verify_functions(name, namespace)

        # add an __new__ method that throws an error.
        namespace["__new__"] = _instantiation_error(name)

        cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        # create a tuple of constant names for introspection.
        type.__setattr__(cls, "__constants__", _collect_constants(cls, allow_private))
        return cls

    def __setattr__(cls, name: str, value: Any) -> NoReturn:
        raise ConstantsModificationError(
            f"Attribute '{name}' of class '{cls.__name__}' cannot be modified. Reason: Constant"
            " class cannot be modified."
        )

    def __repr__(cls) -> str:
        """Returns a string representation of the class."""
        constants = ", ".join(f"{k}={getattr(cls, k)!r}" for k in cls.__constants__)
        return f"<ConstantNamespace {cls.__name__}({constants})>"

    def __iter__(cls) -> Iterator[str]:
        return iter(cls.__constants__)

    def __contains__(cls, name: str) -> bool:
        """Check if a constant name exists."""
        return name in cls.__constants__

    def __len__(cls) -> int:
        """Return the number of constants."""
        return len(cls.__constants__)

    def items(cls) -> list[tuple[str, Any]]:
        """Return all constants as (name, value) pairs."""
        return [(k, getattr(cls, k)) for k in cls.__constants__]

    def keys(cls) -> tuple[str, ...]:
        """Return all constant names."""
        return cls.__constants__

    def values(cls) -> tuple[Any, ...]:
        """Return all constant values."""
        return tuple(getattr(cls, k) for k in cls.__constants__)


class ConstantNamespace(metaclass=ConstantsMetaclass, allow_private=False):
    """Base class to create namespaces (class) of constants.
    Examples:
        >>> class MyConstants(ConstantNamespace):
        ...    A = 1 # this is not a constant. It needs annotation.
        ...    _A: int = 1 # this is not a constant unless allow_private=True.
        ...    B: int = 2 # this is a constant.
        ...    C: int = "3" # raises ConstantsCompositionError, values must match.

        >>> MyConstants.B
        2

        >>> MyConstants.B = 3 # raises ConstantsModificationError.
    """

    __constants__: ClassVar[tuple[str, ...]]


class ConfigKeys(ConstantNamespace):
    """Option keys accepted on error definitions."""

    MESSAGE: str = "message"
    GENERATE_CONVERSIONS: str = "generate_conversions"
    CAUSE: str = "cause"


class GeneratedNames(ConstantNamespace):
    """Names of the members emitted on generated error classes."""

    INIT: str = "__init__"
    STR: str = "__str__"
    REPR: str = "__repr__"
    SOURCE: str = "source"
    CONVERSION_PREFIX: str = "_convert_to_"
    RECORD_CONVERSION: str = "_convert"


RECORD_KEYS: frozenset[str] = frozenset(
    {ConfigKeys.MESSAGE, ConfigKeys.CAUSE, ConfigKeys.GENERATE_CONVERSIONS}
)
UNION_KEYS: frozenset[str] = frozenset({ConfigKeys.MESSAGE, ConfigKeys.GENERATE_CONVERSIONS})
VARIANT_KEYS: frozenset[str] = frozenset(
    {ConfigKeys.MESSAGE, ConfigKeys.CAUSE, ConfigKeys.GENERATE_CONVERSIONS}
)
