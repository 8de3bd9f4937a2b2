"""Strainer: recursive evaluation of values against schemes.

The strainer walks a value and a scheme in lockstep. Units coerce and check
leaf values, object schemas reconcile the fields of mapping values, and chains
run their entries in order until one of them stops. Every call returns an
Outcome holding the (possibly modified) data and a result tree that mirrors
the scheme.

Example:
    ```python
    from dataknobs_strain import Strainer

    strainer = Strainer()
    outcome = strainer.run(
        {"name": 123, "age": "7", "extra": "x"},
        {"name": "string", "age": "integer"},
    )
    outcome.data
    # {'name': '123', 'age': 7}
    outcome.valid
    # True
    ```
"""

from __future__ import annotations

import logging
import threading
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Union

from .exceptions import SchemeError
from .modes import ForceMode
from .registry import SchemeRegistry
from .result import Outcome, ResultNode, ResultTree, Verdict, reduce_to_boolean
from .scheme import Chain, ChainEntry, ObjectSchema, Reference, Unit, as_scheme
from .slots import ItemSlot, Slot, ValueSlot

logger = logging.getLogger(__name__)


class Strainer:
    """Evaluates values against schemes held in a registry.

    Args:
        registry: Registry used to resolve scheme names. A fresh, empty
            registry is created when omitted.
        default_force: Force mode used by ``run`` when none is given.
    """

    def __init__(
        self,
        registry: SchemeRegistry | None = None,
        default_force: ForceMode | str | int = ForceMode.SANITIZE,
    ):
        self.registry = registry if registry is not None else SchemeRegistry()
        self.default_force = ForceMode.parse(default_force)
        self._local = threading.local()

    @classmethod
    def from_config(cls, source: Union[str, Path, dict, None] = None, use_env: bool = True) -> Strainer:
        """Create a strainer from a settings/schemes configuration.

        Args:
            source: YAML/JSON file path or configuration dictionary
            use_env: Apply ``DATAKNOBS_STRAIN_*`` environment overrides

        Returns:
            Configured Strainer
        """
        from .config import build_strainer, load_config

        return build_strainer(load_config(source, use_env=use_env))

    @property
    def active_force(self) -> ForceMode:
        """Force mode of the innermost call in flight on this thread.

        Filters that strain nested values (``array_of``, ``mixed``) use it so
        nested values are reconciled the same way as their container.
        """
        stack = getattr(self._local, "forces", None)
        return stack[-1] if stack else self.default_force

    # Registry shortcuts

    def register(self, name: str, scheme: Any) -> bool:
        return self.registry.register(name, scheme)

    def unregister(self, name: str) -> bool:
        return self.registry.unregister(name)

    def lookup(self, name: str) -> Any:
        return self.registry.lookup(name)

    # Entry facade

    def run(self, data: Any, scheme: Any, force: ForceMode | str | int | None = None) -> Outcome:
        """Strain ``data`` against ``scheme``.

        This is the single evaluation call behind the facade operations.
        Mappings are edited in place; ``Outcome.data`` always holds the
        final value, which differs from ``data`` when the root value itself
        was replaced.

        Args:
            data: Value to strain
            scheme: Scheme (raw or normalized)
            force: Force mode, ``default_force`` when omitted

        Returns:
            Outcome with data, errors and validity

        Raises:
            SchemeNotFoundError: If the scheme uses an unregistered name
            SchemeError: If the scheme is malformed
        """
        mode = self.default_force if force is None else ForceMode.parse(force)
        slot = ValueSlot(data)
        errors = self._strain_slot(slot, scheme, mode)
        return Outcome(data=slot.get(), errors=errors)

    def validate(self, data: Any, scheme: Any) -> Outcome:
        """Check ``data`` without adding or removing fields.

        Units may still rewrite values. The returned Outcome is truthy when
        valid and carries the result tree in ``errors``.
        """
        return self.run(data, scheme, ForceMode.NOCHANGE)

    def complete(self, data: Any, scheme: Any) -> Any:
        """Add every field the scheme declares and return the strained data."""
        return self.run(data, scheme, ForceMode.COMPLETE).data

    def truncate(self, data: Any, scheme: Any) -> Any:
        """Remove every field the scheme does not declare and return the strained data."""
        return self.run(data, scheme, ForceMode.TRUNCATE).data

    def sanitize(self, data: Any, scheme: Any) -> Any:
        """Make the data's fields exactly the scheme's and return the strained data."""
        return self.run(data, scheme, ForceMode.SANITIZE).data

    def _strain_slot(self, slot: Slot, scheme: Any, force: ForceMode) -> ResultNode:
        stack = getattr(self._local, "forces", None)
        if stack is None:
            stack = self._local.forces = []
        stack.append(force)
        try:
            return self.evaluate(slot, scheme, force)
        finally:
            stack.pop()

    # Dispatch core

    def evaluate(self, slot: Slot, scheme: Any, force: ForceMode) -> ResultNode:
        """Evaluate the value in ``slot`` against one scheme.

        Units are invoked directly and their verdict is returned unchanged.
        Names are resolved in the registry and evaluated in place of the
        name. Object schemes are reconciled field by field and chains are
        run entry by entry.

        Args:
            slot: Slot holding the value; may be rewritten
            scheme: Scheme (raw or normalized)
            force: Force mode for object reconciliation

        Returns:
            A Verdict, or a ResultTree for object schemes

        Raises:
            SchemeNotFoundError: If a name is not registered
            SchemeError: If the scheme is malformed
        """
        scheme = as_scheme(scheme)

        if isinstance(scheme, Unit):
            return Verdict.from_raw(scheme(slot, None))
        if isinstance(scheme, Reference):
            logger.debug(f"Resolving scheme '{scheme.name}'")
            return self.evaluate(slot, self.registry.resolve(scheme.name), force)
        if isinstance(scheme, ObjectSchema):
            return self._reconcile(slot, scheme, force)
        if isinstance(scheme, Chain):
            return self._run_chain(slot, scheme, force)
        # as_scheme only produces the four variants above
        raise SchemeError(
            f"Unsupported scheme type: {type(scheme).__name__}",
            context={"scheme": scheme},
        )

    # Structural reconciler

    def _reconcile(self, slot: Slot, scheme: ObjectSchema, force: ForceMode) -> ResultNode:
        value = slot.get()
        if not isinstance(value, MutableMapping):
            if force != ForceMode.SANITIZE:
                return Verdict.fail(True)
            logger.debug(f"Replacing non-mapping {type(value).__name__} with an empty mapping")
            value = {}
            slot.set(value)

        if force.removes_extra:
            for name in [key for key in value if key not in scheme]:
                logger.debug(f"Removing undeclared field '{name}'")
                del value[name]

        result = ResultTree()
        for name, field_scheme in scheme.items():
            if name not in value:
                if not force.adds_missing:
                    continue
                value[name] = None
            result._set(name, self.evaluate(ItemSlot(value, name), field_scheme, force))
        return result

    # Filter-chain evaluator

    def _run_chain(self, slot: Slot, chain: Chain, force: ForceMode) -> ResultNode:
        for entry in chain:
            verdict = self._run_entry(slot, entry, force)
            if isinstance(verdict, ResultTree) or verdict.stops:
                return verdict
        return Verdict.proceed()

    def _run_entry(self, slot: Slot, entry: ChainEntry, force: ForceMode) -> ResultNode:
        if entry.positional:
            errors = self._strain_slot(slot, entry.scheme, force)
            if reduce_to_boolean(errors):
                return errors if isinstance(errors, Verdict) else Verdict.fail(errors)
            return Verdict.proceed()

        scheme = self.registry.resolve(entry.name)
        if isinstance(scheme, Unit):
            return Verdict.from_raw(scheme(slot, entry.options))
        return self.evaluate(slot, scheme, force)
