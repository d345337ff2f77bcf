"""Field inclusion policy for records.

A record's fields are filtered by their directive first and then by the
optional capability hooks its type may implement:

- ``hash_include(field, value) -> bool`` vetoes a whole field. It is only
  consulted for fields without a directive.
- ``hash_include_map(field, key, value) -> bool`` vetoes single entries of
  a map-typed field. A map type may implement it for itself as well.

Hooks signal failure by raising; the exception aborts the hashing call
unchanged.
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .exceptions import NotStringerError
from .introspection import Directive, FieldSpec


@runtime_checkable
class Includable(Protocol):
    """Optional hook deciding whether a record field is hashed."""

    def hash_include(self, field: str, value: Any) -> bool:
        ...


@runtime_checkable
class IncludableMap(Protocol):
    """Optional hook deciding whether a map entry of a field is hashed."""

    def hash_include_map(self, field: str, key: Any, value: Any) -> bool:
        ...


@dataclass(frozen=True)
class Include:
    """Hash this value in place of the field; optionally as a set."""
    value: Any
    set_semantics: bool = False


class Exclude:
    """Leave the field out of the hash entirely."""

    def __repr__(self):
        return "EXCLUDE"


EXCLUDE = Exclude()

Decision = Include | Exclude


def has_text_form(value: Any) -> bool:
    """True if the value's type defines its own __str__ or __repr__."""
    cls = type(value)
    return cls.__str__ is not object.__str__ or cls.__repr__ is not object.__repr__


class FieldPolicy:
    """Resolves per-field inclusion for records."""

    def resolve(self, record: Any, spec: FieldSpec) -> Decision:
        """
        Decide how a single record field takes part in the hash.

        Args:
            record: The record owning the field (queried for hooks)
            spec: The field as enumerated by the introspector

        Returns:
            Include with the value to hash, or EXCLUDE.

        Raises:
            NotStringerError: If a "string" field's value has no text form
        """
        if spec.directive is Directive.IGNORE:
            return EXCLUDE

        if spec.directive is Directive.SET:
            return Include(spec.value, set_semantics=True)

        if spec.directive is Directive.STRING:
            if not has_text_form(spec.value):
                raise NotStringerError(spec.name)
            return Include(str(spec.value))

        if isinstance(record, Includable) and not record.hash_include(spec.name, spec.value):
            return EXCLUDE

        return Include(spec.value)

    def map_entries(self, mapping: Any, record: Any = None, field_name: str = "") -> list[tuple[Any, Any]]:
        """Return the (key, value) pairs of a map that survive the entry hooks."""
        hooks = [h for h in (record, mapping) if isinstance(h, IncludableMap)]
        items = list(mapping.items())
        if not hooks:
            return items
        return [
            (k, v) for k, v in items
            if all(hook.hash_include_map(field_name, k, v) for hook in hooks)
        ]
