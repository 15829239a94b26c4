"""Type annotation utility functions.

This module provides helper functions for working with the annotations of error fields,
including utilities for checking union types, resolving the annotations of a class and
deciding, at generation time, which capabilities a field type offers.
"""
import inspect
from typing import Annotated, Any, ClassVar, TypeAlias, Union, get_origin, get_args
from types import UnionType, NoneType

Annotation: TypeAlias = Any


def is_union(annotation: Annotation) -> bool:
    """Check if an annotation is a union. A union is a Union or UnionType type.

    Args:
        annotation (Any): The annotation to check.

    Returns:
        bool: Whether the annotation is a union.
    """
    o = get_origin(annotation) or annotation
    return o in (Union, UnionType)


def is_optional(annotation: Annotation) -> bool:
    """Check if an annotation is an optional. An optional is a Union with NoneType.

    Args:
        annotation (Any): The annotation to check.

    Returns:
        bool: Whether the annotation is an optional.
    """
    return is_union(annotation) and NoneType in get_args(annotation)


def is_class_var(annotation: Annotation) -> bool:
    """Check if an annotation is a ClassVar, bare or subscripted."""
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def resolve_annotation_types(owner: type) -> dict[str, Annotation]:
    """Get the resolved annotations declared directly on a class.

    String annotations (for example under `from __future__ import annotations`) are evaluated
    in the module of the class. Inherited annotations are not included.

    Args:
        owner (type): The class to read the annotations from.

    Raises:
        NameError: Raised when an annotation refers to a name that is not defined.

    Returns:
        dict[str, Any]: The annotations by attribute name, in declaration order.
    """
    return dict(inspect.get_annotations(owner, eval_str=True))


def strip_annotated(annotation: Annotation) -> Annotation:
    """Get the type under Annotated metadata, the annotation itself if it has none."""
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def offers_diagnostic(annotation: Annotation) -> bool:
    """Check if values of an annotation offer the diagnostic (and stringification) capability.

    Exceptions offer both. A union offers it when every member other than None does.

    Args:
        annotation (Any): The annotation to check.

    Returns:
        bool: Whether a field of this type can be chained as a cause.
    """
    annotation = strip_annotated(annotation)
    if is_union(annotation):
        members = [a for a in get_args(annotation) if a is not NoneType]
        return bool(members) and all(map(offers_diagnostic, members))
    return isinstance(annotation, type) and issubclass(annotation, BaseException)


def dispatch_types(annotation: Annotation) -> tuple[Annotation, ...]:
    """Get the runtime classes a value must be an instance of to match an annotation.

    Examples:
        >>> dispatch_types(int)
        (<class 'int'>,)
        >>> dispatch_types(list[int])
        (<class 'list'>,)
        >>> dispatch_types(KeyError | ValueError)
        (<class 'KeyError'>, <class 'ValueError'>)

    Any matches everything and dispatches on object. Annotations that are neither classes nor
    generic aliases of a class are returned as is; no runtime value dispatches on them. Annotated
    metadata is ignored.

    Args:
        annotation (Any): The annotation to get the dispatch classes for.

    Returns:
        tuple[Any, ...]: The dispatch classes, without duplicates, in declaration order.
    """
    annotation = strip_annotated(annotation)
    if annotation is Any:
        return (object,)
    if is_union(annotation):
        found: list[Annotation] = []
        for member in get_args(annotation):
            if member is NoneType:
                continue
            found.extend(t for t in dispatch_types(member) if t not in found)
        return tuple(found)
    origin = get_origin(annotation)
    if isinstance(origin, type):
        return (origin,)
    return (annotation,)
