"""Verdicts, result trees and outcomes with consistent, predictable behavior.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class VerdictKind(Enum):
    """The three outcomes of a single evaluation step."""

    CONTINUE = "continue"  # no opinion, keep checking
    PASS = "pass"  # checked, no error, stop
    FAIL = "fail"  # error, stop


@dataclass(frozen=True)
class Verdict:
    """Outcome of one evaluation step.

    Units may return a Verdict directly or a raw value (``None``, ``False``
    or anything else). ``from_raw`` maps raw values onto the three kinds
    without relying on truthiness, so an error payload such as ``"0"`` or
    ``0`` is still an error.
    """

    kind: VerdictKind
    payload: Any = None

    @classmethod
    def proceed(cls) -> Verdict:
        """Create a Continue verdict."""
        return _CONTINUE

    @classmethod
    def passed(cls) -> Verdict:
        """Create a Pass verdict (stop, no error)."""
        return _PASS

    @classmethod
    def fail(cls, payload: Any = True) -> Verdict:
        """Create a Fail verdict.

        Args:
            payload: Diagnostic carried with the error, ``True`` when there is none

        Returns:
            Fail verdict
        """
        return cls(VerdictKind.FAIL, payload)

    @classmethod
    def from_raw(cls, raw: Any) -> Verdict:
        """Normalize a Unit's return value.

        ``None`` continues, ``False`` passes, a Verdict is kept, and anything
        else is an error carrying the raw value as its payload.
        """
        if raw is None:
            return _CONTINUE
        if raw is False:
            return _PASS
        if isinstance(raw, Verdict):
            return raw
        return cls(VerdictKind.FAIL, raw)

    @property
    def is_continue(self) -> bool:
        return self.kind is VerdictKind.CONTINUE

    @property
    def is_pass(self) -> bool:
        return self.kind is VerdictKind.PASS

    @property
    def is_fail(self) -> bool:
        return self.kind is VerdictKind.FAIL

    @property
    def stops(self) -> bool:
        """True when a chain must stop at this verdict."""
        return self.kind is not VerdictKind.CONTINUE

    def __repr__(self) -> str:
        if self.kind is VerdictKind.FAIL:
            return f"Verdict.fail({self.payload!r})"
        return f"Verdict.{self.kind.name}"


_CONTINUE = Verdict(VerdictKind.CONTINUE)
_PASS = Verdict(VerdictKind.PASS)


class ResultTree(Mapping):
    """Per-field results produced by reconciling an object schema.

    Mirrors the object scheme it came from: every visited field maps to a
    Verdict, or to a nested ResultTree for nested object schemes. Fields that
    were skipped (absent under a mode that does not add them) have no entry.
    """

    def __init__(self, fields: Mapping[str, ResultNode] | None = None):
        self._fields: dict[str, ResultNode] = dict(fields or {})

    def _set(self, name: str, node: ResultNode) -> None:
        self._fields[name] = node

    def __getitem__(self, name: str) -> ResultNode:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"ResultTree({self._fields!r})"

    def has_errors(self) -> bool:
        """True if any field, at any depth, failed."""
        return reduce_to_boolean(self)

    def error_paths(self, prefix: str = "") -> dict[str, Any]:
        """Flatten failing leaves into ``{"field.subfield": payload}``.

        Args:
            prefix: Path prefix for nested trees

        Returns:
            Dictionary of dotted paths to failure payloads
        """
        errors: dict[str, Any] = {}
        for name, node in self._fields.items():
            path = f"{prefix}.{name}" if prefix else str(name)
            if isinstance(node, ResultTree):
                errors.update(node.error_paths(path))
            elif node.is_fail:
                errors[path] = _plain(node.payload)
        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain nested dicts.

        Continue and Pass leaves become ``None``; Fail leaves become their
        payload, giving a JSON-friendly mirror of the scheme.
        """
        return {name: _plain(node) for name, node in self._fields.items()}


ResultNode = Union[Verdict, ResultTree]


def _plain(node: Any) -> Any:
    if isinstance(node, ResultTree):
        return node.to_dict()
    if isinstance(node, Verdict):
        return _plain(node.payload) if node.is_fail else None
    return node


def reduce_to_boolean(node: ResultNode) -> bool:
    """Collapse a result tree into "errors present".

    A scalar verdict is an error only when it failed; Continue and Pass are
    both clean leaves. A tree has errors if any of its fields does, searched
    depth first and stopping at the first error. An empty tree is clean.

    Args:
        node: Verdict or ResultTree

    Returns:
        True if any failure is present
    """
    if isinstance(node, ResultTree):
        return any(reduce_to_boolean(child) for child in node.values())
    if isinstance(node, Verdict):
        return node.is_fail
    return Verdict.from_raw(node).is_fail


@dataclass(frozen=True)
class Outcome:
    """Result of one top-level strain call.

    ``valid`` is derived from ``errors`` and cannot be set independently.
    """

    data: Any
    errors: ResultNode

    @property
    def valid(self) -> bool:
        return not reduce_to_boolean(self.errors)

    def __bool__(self) -> bool:
        """Allow 'if outcome:' usage to check validity."""
        return self.valid

    def error_paths(self) -> dict[str, Any]:
        """Failing leaves keyed by dotted path (``""`` for a scalar failure)."""
        if isinstance(self.errors, ResultTree):
            return self.errors.error_paths()
        if self.errors.is_fail:
            return {"": _plain(self.errors.payload)}
        return {}
