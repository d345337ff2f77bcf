"""Record field enumeration.

The hashing engine never inspects a record itself: it asks a
``FieldIntrospector`` for the record's fields as ``FieldSpec`` triples of
(name, value, directive). ``DefaultIntrospector`` understands the record
flavours found in everyday Python code:

- dataclasses, with directives in field metadata::

    @dataclass
    class User:
        name: str
        session: str = field(default="", metadata={"hash": "ignore"})

- pydantic models, with directives in ``json_schema_extra``::

    class User(BaseModel):
        name: str
        tags: list[str] = Field(default_factory=list, json_schema_extra={"hash": "set"})

- named tuples and plain objects (public attributes sorted by name, no
  directives).

Names starting with an underscore are private and never enumerated.
"""

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel

from .exceptions import InvalidDirectiveError


class Directive(Enum):
    """Per-field hashing override."""
    NONE = ""
    IGNORE = "ignore"
    SET = "set"
    STRING = "string"

    @classmethod
    def parse(cls, raw: Any) -> "Directive":
        """Convert a raw metadata value into a Directive."""
        if isinstance(raw, Directive):
            return raw
        if raw is None or raw == "":
            return cls.NONE
        if raw == "-":
            return cls.IGNORE
        try:
            return cls(raw)
        except ValueError:
            raise InvalidDirectiveError(f"unknown hash directive: {raw!r}") from None


@dataclass(frozen=True)
class FieldSpec:
    """A record field as seen by the hashing engine."""
    name: str
    value: Any
    directive: Directive = Directive.NONE


class FieldIntrospector(Protocol):
    """Protocol for enumerating the fields of a record value."""

    def fields(self, value: Any, directive_key: str) -> list[FieldSpec] | None:
        """
        Enumerate the fields of a record.

        Args:
            value: The value being hashed
            directive_key: Metadata key holding the per-field directive

        Returns:
            Fields in declaration order, or None if value is not a record.
        """
        ...


def _is_public(name: str) -> bool:
    return not name.startswith("_")


class DefaultIntrospector:
    """Introspects dataclasses, pydantic models, named tuples and plain objects."""

    def fields(self, value: Any, directive_key: str) -> list[FieldSpec] | None:
        if isinstance(value, type):
            return None

        if dataclasses.is_dataclass(value):
            return [
                FieldSpec(f.name, getattr(value, f.name), Directive.parse(f.metadata.get(directive_key)))
                for f in dataclasses.fields(value)
                if _is_public(f.name)
            ]

        if isinstance(value, BaseModel):
            return self._model_fields(value, directive_key)

        if isinstance(value, tuple) and hasattr(type(value), "_fields"):
            return [
                FieldSpec(name, getattr(value, name))
                for name in type(value)._fields
                if _is_public(name)
            ]

        # Containers are hashed by content, not as records
        if isinstance(value, Sequence):
            return None

        # Attribute insertion order varies between instances, so sort by name
        if hasattr(value, "__dict__"):
            return [
                FieldSpec(name, field_value)
                for name, field_value in sorted(vars(value).items())
                if _is_public(name)
            ]

        return None

    def _model_fields(self, model: BaseModel, directive_key: str) -> list[FieldSpec]:
        specs = []
        for name, info in type(model).model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            specs.append(
                FieldSpec(name, getattr(model, name), Directive.parse(extra.get(directive_key)))
            )
        return specs
