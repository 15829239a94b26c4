"""Errors raised while generating the capabilities of an error type.

Every error names the offending item, either a record/union name or a qualified variant name
such as 'FetchError.Receive', and is fatal for that item only.
"""

from typing import Any

from ..abstract.exceptions.traced_exceptions import TracedException


class GenerationError(TracedException):
    """Base error of the generation pipeline."""

    def __init__(self, item: str, reason: str, placeholder: str | None = None) -> None:
        super().__init__(f"{item}: {reason}")
        self.item = item
        self.reason = reason
        self.placeholder = placeholder


class TemplateSyntaxError(GenerationError):
    """Signals malformed placeholder delimiters in a message template."""

    def __init__(
        self,
        item: str,
        template: str,
        position: int,
        reason: str,
        placeholder: str | None = None,
    ) -> None:
        super().__init__(
            item,
            f"{reason} at position {position} in message template {template!r}.",
            placeholder,
        )
        self.template = template
        self.position = position


class UnresolvedFieldReference(GenerationError):
    """Signals a placeholder naming a field absent from the enclosing shape."""

    def __init__(self, item: str, placeholder: str, field: str, reason: str) -> None:
        super().__init__(
            item, f"placeholder '{{{placeholder}}}' does not resolve: {reason}", placeholder
        )
        self.field = field


class MissingMessageConfiguration(GenerationError):
    """Signals an item or variant without a resolvable message template."""

    def __init__(self, item: str, hint: str = "") -> None:
        super().__init__(item, f"no message template is configured.{hint}")


class InvalidCauseDesignation(GenerationError):
    """Signals an explicit cause naming a nonexistent field."""

    def __init__(self, item: str, designation: Any) -> None:
        super().__init__(item, f"cause designation {designation!r} does not name a field.")
        self.designation = designation


class DuplicateConversionTarget(GenerationError):
    """Signals two variants sharing a payload type while conversions are generated."""

    def __init__(
        self, item: str, first_variant: str, second_variant: str, payload_type: Any
    ) -> None:
        super().__init__(
            item,
            f"variants '{first_variant}' and '{second_variant}' both wrap"
            f" {_type_name(payload_type)}; conversions would be ambiguous.",
        )
        self.first_variant = first_variant
        self.second_variant = second_variant
        self.payload_type = payload_type


class InvalidConfiguration(GenerationError):
    """Signals an unknown option, an option outside its scope or a value of the wrong type."""

    def __init__(self, item: str, key: str, reason: str) -> None:
        super().__init__(item, f"option '{key}' {reason}")
        self.key = key


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return f"'{annotation.__qualname__}'"
    return f"'{annotation!r}'"
