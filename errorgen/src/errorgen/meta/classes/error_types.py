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
Created: 2025-08-04
Description: This module provides base classes to declare error types whose message,
            cause and conversions are generated when the class statement runs. The class
            keyword arguments are the options, the annotations are the fields.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, ClassVar, NoReturn, Self

from ...abstract.exceptions.traced_exceptions import TracedException
from ...generation.emitter import Binding, EmittedCode, EmittedFunction, materialize
from ...generation.pipeline import generate
from ...generation.attributes import ErrorSpec
from ...generation.schema import (
    POSITIONAL_NAME,
    FieldShape,
    ItemKind,
    TypeSchema,
    VariantSchema,
    positional_name,
)
from ..typing.utilities import is_class_var, resolve_annotation_types
from .constants import GeneratedNames

logger = logging.getLogger(__name__)

RESERVED_FIELDS: frozenset[str] = frozenset(
    {
        "self",
        "args",
        "with_traceback",
        "add_note",
        "traceback_format",
        "causes",
        GeneratedNames.SOURCE,
    }
)
GENERATED_MEMBERS: tuple[str, ...] = (
    GeneratedNames.INIT,
    GeneratedNames.STR,
    GeneratedNames.REPR,
    GeneratedNames.SOURCE,
)


class ErrorCompositionError(TracedException):
    """Composition error of an error class."""


class ErrorInstantiationError(TracedException):
    """Instantiation error of an abstract error class."""


def _verify_functions(name: str, namespace: Mapping[str, Any]) -> None:
    """Verify that no generated member is defined by hand.

    Args:
        name (str): name of the class.
        namespace (Mapping[str, Any]): namespace of the class.

    Raises:
        ErrorCompositionError: Raised when a generated member is defined.
    """
    defined = [g for g in GENERATED_MEMBERS if g in namespace]
    if defined:
        raise ErrorCompositionError(
            f"Error class '{name}' is disallowed to define {', '.join(defined)} since"
            " they are generated."
        )


def _shape_of(name: str, owner: type) -> FieldShape:
    """Build the field shape of a record or variant declaration from its annotations.

    No field gives a unit shape, fields named _0, _1, ... in order a positional one, any other
    names a named one.
    """
    try:
        annotations = resolve_annotation_types(owner)
    except NameError as e:
        raise ErrorCompositionError(f"Could not resolve the fields of '{name}': {e}") from e
    fields = {k: a for k, a in annotations.items() if not is_class_var(a)}

    invalid = sorted(k for k in fields if k in RESERVED_FIELDS or k.startswith("__"))
    if invalid:
        raise ErrorCompositionError(f"Field names {invalid} of '{name}' are reserved.")

    positional = [k for k in fields if POSITIONAL_NAME.fullmatch(k)]
    if not fields or len(positional) != len(fields):
        return FieldShape.named(fields)
    if positional != [positional_name(i) for i in range(len(fields))]:
        raise ErrorCompositionError(
            f"Positional fields of '{name}' must be declared in order as _0, _1, ...;"
            f" got {positional}."
        )
    return FieldShape.positional(*fields.values())


def _install(target: type, functions: tuple[EmittedFunction, ...]) -> None:
    for function in functions:
        fn = materialize(function)
        fn.__module__ = target.__module__
        if function.binding is Binding.CLASSMETHOD:
            setattr(target, function.name, classmethod(fn))
        else:
            setattr(target, function.name, fn)


class VariantMeta(type):
    """Metaclass of variant declarations. Captures the class keyword arguments as options."""

    __error_options__: dict[str, Any]

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        /,
        **options: Any,
    ) -> Any:
        _verify_functions(name, namespace)
        cls = super().__new__(mcs, name, bases, namespace)
        cls.__error_options__ = options
        return cls


class Variant(metaclass=VariantMeta):
    """Declaration of one case of an ErrorUnion, to nest in the union class body.

    The declaration is replaced by a generated subclass of the union.
    Examples:
        >>> class FetchError(ErrorUnion, message="fetch failed"):
        ...    class Timeout(Variant): # unit variant, default message.
        ...        pass
        ...    class Refused(Variant, message="refused by {host}"):
        ...        host: str

        >>> isinstance(FetchError.Refused("example.org"), FetchError)
        True
    """


# Members of a declaration that are not carried over to the generated variant class.
_DECLARATION_ONLY = frozenset(
    {"__dict__", "__weakref__", "__error_options__", "__firstlineno__", "__static_attributes__"}
)


class ErrorMetaclass(type):
    """Metaclass running the generation pipeline on error classes."""

    __error_kind__: ItemKind | None
    __error_spec__: ErrorSpec | None
    __variant__: str | None

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        /,
        **options: Any,
    ) -> Any:
        # base classes of this module declare their kind.
        if "__error_kind__" in namespace:
            return super().__new__(mcs, name, bases, namespace)

        for base in bases:
            if isinstance(base, ErrorMetaclass) and base.__error_spec__ is not None:
                raise ErrorCompositionError(
                    f"Error class '{name}' cannot derive from the generated error class"
                    f" '{base.__name__}'."
                )

        _verify_functions(name, namespace)
        cls = super().__new__(mcs, name, bases, namespace)
        match cls.__error_kind__:
            case ItemKind.RECORD:
                _build_record(cls, options)
            case ItemKind.TAGGED_UNION:
                _build_union(cls, options)
            case _:
                raise ErrorCompositionError(
                    f"Error class '{name}' must derive from ErrorRecord or ErrorUnion."
                )
        return cls

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls.__error_spec__ is None or (
            cls.__error_kind__ is ItemKind.TAGGED_UNION and cls.__variant__ is None
        ):
            _instantiation_error(cls)
        return super().__call__(*args, **kwargs)


def _instantiation_error(cls: type) -> NoReturn:
    raise ErrorInstantiationError(
        f"Cannot instantiate error class '{cls.__name__}'. Only records and variants of tagged"
        " unions can be instantiated."
    )


def _build_record(cls: ErrorMetaclass, options: dict[str, Any]) -> None:
    shape = _shape_of(cls.__name__, cls)
    generated = generate(TypeSchema(cls.__name__, ItemKind.RECORD, shape, options=options))
    _install(cls, generated.code.for_owner(cls.__name__))
    cls.__error_spec__ = generated.spec
    cls.__emitted__ = generated.code
    cls.__fields__ = shape.names
    cls.__conversions__ = _conversion_table(generated.code)


def _conversion_table(code: EmittedCode) -> Mapping[type, str]:
    # annotations that are not classes never match a runtime value.
    return MappingProxyType(
        {
            t: entry.function_name
            for entry in code.conversions
            for t in entry.dispatch_types
            if isinstance(t, type)
        }
    )


def _build_union(cls: ErrorMetaclass, options: dict[str, Any]) -> None:
    try:
        own = resolve_annotation_types(cls)
    except NameError as e:
        raise ErrorCompositionError(
            f"Could not resolve the annotations of '{cls.__name__}': {e}"
        ) from e
    if any(not is_class_var(a) for a in own.values()):
        raise ErrorCompositionError(
            f"Tagged union '{cls.__name__}' cannot have fields. Declare them on its variants."
        )

    declarations = [
        (key, value)
        for key, value in vars(cls).items()
        if isinstance(value, VariantMeta) and value is not Variant
    ]
    variants = tuple(
        VariantSchema(key, _shape_of(f"{cls.__name__}.{key}", d), d.__error_options__)
        for key, d in declarations
    )
    generated = generate(
        TypeSchema(cls.__name__, ItemKind.TAGGED_UNION, variants=variants, options=options)
    )
    cls.__error_spec__ = generated.spec
    cls.__emitted__ = generated.code

    variant_classes: dict[str, type] = {}
    for (key, declaration), schema, item in zip(declarations, variants, generated.resolved.items):
        variant_cls = _make_variant(cls, key, declaration, schema.shape)
        _install(variant_cls, generated.code.for_owner(item.qualified_name))
        setattr(cls, key, variant_cls)
        variant_classes[key] = variant_cls

    _install(cls, generated.code.for_owner(cls.__name__))
    cls.__variants__ = MappingProxyType(variant_classes)
    cls.__conversions__ = _conversion_table(generated.code)
    logger.debug(
        "Built tagged union '%s' with %d variants and %d conversions.",
        cls.__name__,
        len(variant_classes),
        len(generated.code.conversions),
    )


def _make_variant(union: type, key: str, declaration: type, shape: FieldShape) -> type:
    namespace = {
        k: v
        for k, v in vars(declaration).items()
        if k not in _DECLARATION_ONLY and not k.startswith("__annotat")
    }
    namespace.update(
        __module__=union.__module__,
        __qualname__=f"{union.__qualname__}.{key}",
        __variant__=key,
        __fields__=shape.names,
    )
    return type.__new__(ErrorMetaclass, key, (union,), namespace)


class ErrorBase(TracedException, metaclass=ErrorMetaclass):
    """Common base of generated error classes."""

    __error_kind__: ClassVar[ItemKind | None] = None
    __error_spec__: ClassVar[ErrorSpec | None] = None
    __emitted__: ClassVar[EmittedCode | None] = None
    __fields__: ClassVar[tuple[str, ...]] = ()
    __variant__: ClassVar[str | None] = None
    __conversions__: ClassVar[Mapping[type, str]] = MappingProxyType({})

    def source(self) -> object | None:
        """The cause of this error, None if it has none. Generated on concrete classes."""
        return None

    @classmethod
    def conversion_for(cls, payload_type: type) -> Callable[[Any], Self] | None:
        """Get the conversion constructor matching a payload type, the most specific class in
        its method resolution order first.

        Args:
            payload_type (type): The type of the value to convert.

        Returns:
            Callable[[Any], Self] | None: The conversion constructor, None if this error does
                not convert from this type.
        """
        for klass in payload_type.__mro__:
            name = cls.__conversions__.get(klass)
            if name is not None:
                return getattr(cls, name)
        return None

    @classmethod
    def convert(cls, value: Any) -> Self:
        """Wrap a value into this record, or into the variant of this union carrying its type.

        Raises:
            TypeError: Raised when no conversion accepts the type of the value.
        """
        converter = cls.conversion_for(type(value))
        if converter is None:
            raise TypeError(
                f"'{cls.__qualname__}' has no conversion from '{type(value).__qualname__}'."
            )
        return converter(value)

    @classmethod
    @contextmanager
    def converting(cls) -> Iterator[None]:
        """Context manager re-raising the exceptions this error converts from as this error."""
        try:
            yield
        except Exception as e:
            converter = None if isinstance(e, cls) else cls.conversion_for(type(e))
            if converter is None:
                raise
            raise converter(e) from e


class ErrorRecord(ErrorBase):
    """Base class of error records: one message template over one set of fields.

    With generate_conversions=True, a single-field record gets a conversion constructor from
    the type of its field, used by convert() and converting().
    Examples:
        >>> class HttpError(ErrorRecord, message="The server returned {self.code}."):
        ...    code: int

        >>> str(HttpError(404))
        'The server returned 404.'

        >>> class InvalidValue(ErrorRecord, message="Expected '42' but got {_0}."):
        ...    _0: float

        >>> class ConfigError(ErrorRecord, message="bad config: {_0}", generate_conversions=True):
        ...    _0: KeyError

        >>> ConfigError.convert(KeyError("port")).source()
        KeyError('port')
    """

    __error_kind__ = ItemKind.RECORD


class ErrorUnion(ErrorBase):
    """Base class of tagged unions of errors. Variants are declared as nested Variant classes.

    With generate_conversions=True, every single-field variant gets a conversion constructor
    from its payload type, used by convert() and converting(). A variant may also request its
    own conversion, or decline the one of its union, with the same option.
    Examples:
        >>> class AppError(ErrorUnion, generate_conversions=True):
        ...    class Http(Variant, message="Download failed: {_0}"):
        ...        _0: HttpError

        >>> with AppError.converting():
        ...    raise HttpError(500) # re-raised as AppError.Http(HttpError(500))
    """

    __error_kind__ = ItemKind.TAGGED_UNION
    __variants__: ClassVar[Mapping[str, type]] = MappingProxyType({})
