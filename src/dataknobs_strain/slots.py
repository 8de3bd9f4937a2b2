"""Value slots: explicit read/write handles on the value being strained.

Units receive a slot instead of the value itself so they can replace the value
(coercion, trimming, defaulting) without the caller having to know where it
lives: at the root of a call, or as a field inside a mapping.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import MutableMapping, MutableSequence
from typing import Any


class Slot(ABC):
    """Base class for value slots."""

    @abstractmethod
    def get(self) -> Any:
        """Read the current value."""
        pass

    @abstractmethod
    def set(self, value: Any) -> None:
        """Replace the current value."""
        pass

    @property
    def value(self) -> Any:
        """Current value held by the slot."""
        return self.get()

    @value.setter
    def value(self, value: Any) -> None:
        self.set(value)


class ValueSlot(Slot):
    """A slot that owns its value, used for the root of a strain call."""

    def __init__(self, value: Any = None):
        self._value = value

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"ValueSlot({self._value!r})"


class ItemSlot(Slot):
    """A slot addressing ``container[key]`` in a mapping or list."""

    def __init__(self, container: MutableMapping | MutableSequence, key: Any):
        self.container = container
        self.key = key

    def get(self) -> Any:
        return self.container[self.key]

    def set(self, value: Any) -> None:
        self.container[self.key] = value

    def __repr__(self) -> str:
        return f"ItemSlot({self.key!r})"
