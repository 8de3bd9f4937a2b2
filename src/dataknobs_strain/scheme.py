"""Scheme variants and normalization of raw Python scheme values.

A scheme is one of four variants:

- ``Reference``: the name of a scheme held by a registry
- ``Unit``: a filter callable ``(slot, options) -> verdict``
- ``ObjectSchema``: field name -> scheme, for mapping-shaped values
- ``Chain``: an ordered list of entries tried one after the other

Schemes are usually written as plain Python values and normalized with
``as_scheme``:

    ```python
    user = {
        "email": ["string", "email", "UserExists"],
        "name": ["string", {"regexp": r"^[A-Za-z0-9_-]{3,20}$"}],
        "address": {"city": "string", "street": "string"},
    }
    ```

Normalization is shallow. Nested parts stay raw until the evaluator reaches
them, so a malformed nested scheme is reported when it is used rather than
when it is declared.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .exceptions import SchemeError


class Scheme:
    """Base class of the scheme variants."""

    __slots__ = ()


class Reference(Scheme):
    """A scheme known by its registered name."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Reference) and other.name == self.name

    def __hash__(self) -> int:
        return hash(("Reference", self.name))

    def __repr__(self) -> str:
        return f"Reference({self.name!r})"


class Unit(Scheme):
    """A leaf filter.

    The wrapped callable is invoked as ``func(slot, options)``. It may
    replace ``slot.value`` and returns ``None`` (continue), ``False`` (stop,
    no error), a Verdict, or any other value (error, with that value as the
    diagnostic).
    """

    __slots__ = ("func", "name")

    def __init__(self, func: Callable[..., Any], name: str | None = None):
        if not callable(func):
            raise SchemeError(
                f"Unit requires a callable, got {type(func).__name__}",
                context={"value": func},
            )
        self.func = func
        self.name = name or getattr(func, "__name__", type(func).__name__)

    def __call__(self, slot: Any, options: Any = None) -> Any:
        return self.func(slot, options)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Unit) and other.func is self.func

    def __hash__(self) -> int:
        return hash(("Unit", id(self.func)))

    def __repr__(self) -> str:
        return f"Unit({self.name})"


class ObjectSchema(Scheme, Mapping):
    """Expected shape of a mapping value: field name -> scheme."""

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any]):
        self._fields = MappingProxyType(dict(fields))

    @property
    def fields(self) -> Mapping[str, Any]:
        return self._fields

    def __getitem__(self, name: str) -> Any:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"ObjectSchema({dict(self._fields)!r})"


@dataclass(frozen=True)
class ChainEntry:
    """One entry of a chain.

    A named entry (``name`` set) is resolved in the registry and receives
    ``options`` if it resolves to a Unit. A positional entry (``name`` is
    None) carries a full scheme in ``scheme``.
    """

    name: str | None = None
    options: Any = None
    scheme: Any = None

    @property
    def positional(self) -> bool:
        return self.name is None

    @classmethod
    def named(cls, name: str, options: Any = None) -> ChainEntry:
        return cls(name=name, options=options)

    @classmethod
    def sub(cls, scheme: Any) -> ChainEntry:
        return cls(scheme=scheme)


class Chain(Scheme):
    """An ordered sequence of chain entries."""

    __slots__ = ("entries",)

    def __init__(self, entries: Any = ()):
        parsed: list[ChainEntry] = []
        for item in entries:
            parsed.extend(_chain_entries(item))
        self.entries: tuple[ChainEntry, ...] = tuple(parsed)

    def __iter__(self) -> Iterator[ChainEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Chain) and other.entries == self.entries

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"Chain({list(self.entries)!r})"


def _chain_entries(item: Any) -> list[ChainEntry]:
    """Turn one raw chain item into chain entries."""
    if isinstance(item, ChainEntry):
        return [item]
    if isinstance(item, str):
        return [ChainEntry.named(item)]
    if isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str):
        return [ChainEntry.named(item[0], item[1])]
    if isinstance(item, Mapping) and not isinstance(item, ObjectSchema):
        # {"length": (2, 10), "regexp": "..."} -> one named entry per key
        return [ChainEntry.named(str(name), options) for name, options in item.items()]
    return [ChainEntry.sub(item)]


def is_scheme_like(value: Any) -> bool:
    """True if ``value`` has the shape of one of the scheme variants."""
    return isinstance(value, (Scheme, str, Mapping, list, tuple)) or callable(value)


def as_scheme(value: Any) -> Scheme:
    """Normalize a raw value into one of the scheme variants.

    Args:
        value: Scheme instance, name, callable, mapping, list or tuple

    Returns:
        The matching Scheme

    Raises:
        SchemeError: If the value has none of the scheme shapes
    """
    if isinstance(value, Scheme):
        return value
    if isinstance(value, str):
        return Reference(value)
    if isinstance(value, Mapping):
        return ObjectSchema(value)
    if isinstance(value, (list, tuple)):
        return Chain(value)
    if callable(value):
        return Unit(value)
    raise SchemeError(
        f"Cannot interpret {type(value).__name__} as a scheme",
        context={"value": value},
    )
