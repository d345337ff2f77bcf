"""Recursive structural visitor.

Every value is reduced to a stream of bytes written into a ``HashSink``:

- absence (None, pd.NA, pd.NaT) is a single signed zero byte
- bool is a single byte 0/1
- integers are 8 bytes (int64, or uint64 for unsigned values)
- floats are written at their native width, complex as real then imaginary
- text is its raw UTF-8 bytes, bytes are written as-is
- sequences visit their elements in order; a pandas Series writes its name
  and index labels first, a DataFrame writes each column then its index
- maps and sets visit their keys in digest order (see ``MapOrderer``)
- records write their type name, then each included field's name and value

No type tags or length prefixes are written, so a few distinct shapes share
a byte stream (``None`` and ``False``, ``"ab"`` and ``["a", "b"]``). This
is part of the hash definition; changing it would change every code.
"""

import datetime
import decimal
import functools
import types
import uuid
import weakref
from collections.abc import Mapping, Sequence, Set
from enum import Enum
from pathlib import PurePath
from typing import Any, Callable

import numpy as np
import pandas as pd

from .digests import Accumulator
from .exceptions import UnsupportedKindError
from .introspection import FieldSpec
from .options import HashOptions
from .ordering import MapOrderer
from .policy import EXCLUDE, FieldPolicy
from .sink import HashSink

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1

_EXECUTABLE_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.ModuleType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    functools.partial,
    type,
)

_TEXT_SCALARS = (
    datetime.timedelta,
    decimal.Decimal,
    np.datetime64,
    np.timedelta64,
    PurePath,
)


def unwrap(value: Any) -> Any:
    """Strip reference and wrapper layers until a concrete value remains."""
    while True:
        if isinstance(value, weakref.ref):
            value = value()
        elif isinstance(value, np.ndarray) and value.ndim == 0:
            value = value[()]
        elif isinstance(value, Enum):
            value = value.value
        else:
            return value


def normalize(value: Any) -> Any:
    """Map absence markers and library scalars onto the core value kinds."""
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, _TEXT_SCALARS):
        return str(value)
    if isinstance(value, uuid.UUID):
        return value.bytes
    return value


def type_identity(value: Any) -> str:
    # Classes built by one factory share module and qualname, so they match
    cls = type(value)
    return f"{cls.__module__}.{cls.__qualname__}"


def digest(value: Any, options: HashOptions, digest_factory: Callable[[], Accumulator]) -> int:
    """Hash value into a fresh accumulator built by digest_factory."""
    sink = HashSink(digest_factory())
    sink.reset()
    HashEngine(sink, options).visit(value)
    return sink.finalize()


class HashEngine:
    """Depth-first visitor writing a value's canonical byte stream into a sink."""

    def __init__(self, sink: HashSink, options: HashOptions):
        self.sink = sink
        self.options = options
        self.policy = FieldPolicy()
        self.orderer = MapOrderer(self._digest, options)

    def _digest(self, value: Any, digest_factory: Callable[[], Accumulator]) -> int:
        return digest(value, self.options, digest_factory)

    def visit(
        self,
        value: Any,
        set_semantics: bool = False,
        parent: Any = None,
        field_name: str = "",
    ) -> None:
        """
        Write the canonical byte stream of value into the sink.

        Args:
            value: The value to hash
            set_semantics: Order a sequence value by content (the "set"
                directive)
            parent: Record owning value, consulted for map-entry hooks
            field_name: Name of the field holding value in parent

        Raises:
            UnsupportedKindError: If value (or anything inside it) has no
                hashing rule
        """
        value = normalize(unwrap(value))
        sink = self.sink

        if value is None:
            sink.write_scalar("b", 0)
            return

        if isinstance(value, (bool, np.bool_)):
            sink.write_scalar("b", 1 if value else 0)
            return

        if isinstance(value, np.number):
            self._write_numpy_scalar(value)
            return

        if isinstance(value, int):
            self._write_int(value)
            return

        if isinstance(value, float):
            sink.write_scalar("d", value)
            return

        if isinstance(value, complex):
            sink.write_scalar("dd", value.real, value.imag)
            return

        if isinstance(value, str):
            sink.write_bytes(value.encode("utf-8"))
            return

        if isinstance(value, (bytes, bytearray, memoryview)):
            sink.write_bytes(value)
            return

        if isinstance(value, _EXECUTABLE_TYPES):
            raise UnsupportedKindError(
                f"unknown kind to hash: {type(value).__name__}", type(value)
            )

        if isinstance(value, Mapping):
            self._visit_map(value, parent, field_name)
            return

        if isinstance(value, Set):
            self._visit_members(list(value))
            return

        if isinstance(value, pd.DataFrame):
            self._visit_frame(value)
            return

        if isinstance(value, pd.Series):
            self.visit(value.name)
            self._visit_sequence(list(value.index.to_numpy()), False)
            self._visit_sequence(list(value.to_numpy()), set_semantics)
            return

        if isinstance(value, pd.Index):
            self._visit_sequence(list(value.to_numpy()), set_semantics)
            return

        if isinstance(value, np.ndarray):
            self._visit_sequence(list(value), set_semantics)
            return

        fields = self.options.introspector.fields(value, self.options.directive_key)
        if fields is not None:
            self._visit_record(value, fields)
            return

        if isinstance(value, Sequence):
            self._visit_sequence(value, set_semantics)
            return

        raise UnsupportedKindError(
            f"unknown kind to hash: {type(value).__name__}", type(value)
        )

    def _write_int(self, value: int) -> None:
        if INT64_MIN <= value <= INT64_MAX:
            self.sink.write_scalar("q", value)
        elif INT64_MAX < value <= UINT64_MAX:
            self.sink.write_scalar("Q", value)
        else:
            raise UnsupportedKindError(f"integer out of 64-bit range: {value}", int)

    def _write_numpy_scalar(self, value: np.number) -> None:
        if isinstance(value, np.signedinteger):
            self.sink.write_scalar("q", int(value))
        elif isinstance(value, np.unsignedinteger):
            self.sink.write_scalar("Q", int(value))
        elif isinstance(value, np.floating):
            fmt = {2: "e", 4: "f"}.get(value.itemsize, "d")
            self.sink.write_scalar(fmt, float(value))
        elif isinstance(value, np.complexfloating):
            fmt = "ff" if value.itemsize == 8 else "dd"
            self.sink.write_scalar(fmt, float(value.real), float(value.imag))
        else:
            raise UnsupportedKindError(
                f"unknown kind to hash: {type(value).__name__}", type(value)
            )

    def _visit_sequence(self, items: Sequence[Any], set_semantics: bool) -> None:
        if set_semantics or self.options.slices_as_sets:
            self._visit_members(list(items))
            return
        for item in items:
            self.visit(item)

    def _visit_members(self, members: list[Any]) -> None:
        for i in self.orderer.order(members, dedupe=True):
            self.visit(members[i])

    def _visit_map(self, mapping: Mapping, parent: Any, field_name: str) -> None:
        entries = self.policy.map_entries(mapping, parent, field_name)
        for i in self.orderer.order([key for key, _ in entries]):
            key, item = entries[i]
            self.visit(key)
            self.visit(item)

    def _visit_frame(self, frame: pd.DataFrame) -> None:
        for i, label in enumerate(frame.columns):
            self.visit(label)
            self._visit_sequence(list(frame.iloc[:, i].to_numpy()), False)
        self._visit_sequence(list(frame.index.to_numpy()), False)

    def _visit_record(self, record: Any, fields: list[FieldSpec]) -> None:
        included = []
        for spec in fields:
            decision = self.policy.resolve(record, spec)
            if decision is not EXCLUDE:
                included.append((spec.name, decision))

        # Records with nothing to hash are indistinguishable, whatever their type
        if not included:
            return

        self.sink.write_bytes(type_identity(record).encode("utf-8"))
        for name, decision in included:
            self.sink.write_bytes(name.encode("utf-8"))
            self.visit(
                decision.value,
                set_semantics=decision.set_semantics,
                parent=record,
                field_name=name,
            )
